"""
Alkitu Site - Internationalization
Locale negotiation and the bundled ES/EN dictionaries
"""
import json
import os
from functools import lru_cache
from typing import Dict, Optional

from flask import current_app

TRANSLATIONS_DIR = os.path.join(os.path.dirname(__file__), 'translations')

LOCALE_COOKIE = 'locale'
THEME_COOKIE = 'theme'
THEMES = ('light', 'dark', 'system')


def supported_locales():
    return current_app.config.get('SUPPORTED_LOCALES', ('es', 'en'))


def default_locale() -> str:
    return current_app.config.get('DEFAULT_LOCALE', 'es')


def is_supported(lang: Optional[str]) -> bool:
    return bool(lang) and lang in supported_locales()


@lru_cache(maxsize=None)
def load_translations(lang: str) -> Dict:
    """Dictionary for a locale; callers check the locale is supported first"""
    with open(os.path.join(TRANSLATIONS_DIR, f'{lang}.json'), encoding='utf-8') as fh:
        return json.load(fh)


def negotiate_locale(request) -> str:
    """locale cookie, then Accept-Language, then the default locale"""
    cookie_locale = request.cookies.get(LOCALE_COOKIE)
    if is_supported(cookie_locale):
        return cookie_locale
    best = request.accept_languages.best_match(supported_locales())
    return best or default_locale()
