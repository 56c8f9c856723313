"""
Alkitu Site - Public Pages
Server-rendered bilingual pages under /<lang>/
"""
import logging
import secrets

from flask import Blueprint, abort, redirect, render_template, request, url_for

from alkitu.errors import ApiError, NotFoundError
from alkitu.i18n import (
    LOCALE_COOKIE, THEME_COOKIE, THEMES, is_supported, load_translations,
    negotiate_locale, supported_locales
)
from alkitu.services.category_service import category_service
from alkitu.services.newsletter_service import newsletter_service
from alkitu.services.profile_service import profile_service
from alkitu.services.project_service import project_service
from alkitu.utils import safe_int

logger = logging.getLogger(__name__)

site_bp = Blueprint('site', __name__)

FINGERPRINT_COOKIE = 'session_fingerprint'
FINGERPRINT_MAX_AGE = 60 * 60
LOCALE_MAX_AGE = 60 * 60 * 24 * 365
PROJECTS_PER_PAGE = 12


@site_bp.url_value_preprocessor
def check_locale(endpoint, values):
    if values and 'lang' in values and not is_supported(values['lang']):
        abort(404)


def site_context(lang: str) -> dict:
    """Template variables shared by every public page"""
    theme = request.cookies.get(THEME_COOKIE)
    return {
        'lang': lang,
        't': load_translations(lang),
        'theme': theme if theme in THEMES else 'system',
        'themes': THEMES,
        'locales': supported_locales(),
    }


@site_bp.context_processor
def page_context():
    return site_context((request.view_args or {}).get('lang') or negotiate_locale(request))


@site_bp.after_request
def set_visitor_cookies(response):
    """Remember the page locale and give new visitors a session fingerprint"""
    lang = (request.view_args or {}).get('lang')
    if is_supported(lang):
        response.set_cookie(LOCALE_COOKIE, lang, max_age=LOCALE_MAX_AGE, path='/', samesite='Lax')
    if not request.cookies.get(FINGERPRINT_COOKIE):
        response.set_cookie(
            FINGERPRINT_COOKIE,
            secrets.token_hex(16),
            max_age=FINGERPRINT_MAX_AGE,
            path='/',
            httponly=True,
            samesite='Strict'
        )
    return response


@site_bp.route('/')
def root():
    return redirect(url_for('site.home', lang=negotiate_locale(request)), code=302)


@site_bp.route('/<lang>/')
def home(lang):
    featured = project_service.list_public(page=1, limit=6)['projects']
    return render_template('pages/home.html', projects=featured)


@site_bp.route('/<lang>/projects')
def projects(lang):
    page = safe_int(request.args.get('page'), 1, min_val=1)
    category = request.args.get('category')
    result = project_service.list_public(page=page, limit=PROJECTS_PER_PAGE, category_slug=category,
                                         search=request.args.get('search'))
    return render_template(
        'pages/projects.html',
        projects=result['projects'],
        pagination=result['pagination'],
        categories=category_service.list_categories(include_count=False),
        active_category=category
    )


@site_bp.route('/<lang>/projects/<slug>')
def project_detail(lang, slug):
    try:
        project = project_service.get_public(slug)
    except NotFoundError:
        abort(404)
    return render_template('pages/project_detail.html', project=project.to_dict(),
                           title=project.localized(lang, 'title'))


@site_bp.route('/<lang>/contact')
def contact(lang):
    return render_template('pages/contact.html')


@site_bp.route('/<lang>/profile/<username>')
def profile(lang, username):
    try:
        data = profile_service.get_public(username)
    except NotFoundError:
        abort(404)
    return render_template('pages/profile.html', profile=data)


# ==========================================
# Newsletter links
# ==========================================

@site_bp.route('/<lang>/newsletter/verify')
def newsletter_verify(lang):
    token = request.args.get('token', '')
    try:
        newsletter_service.verify(token)
    except ApiError as e:
        logger.info(f"Newsletter verification link rejected: {e.code}")
        return render_template('newsletter/verify.html', verified=False), e.status_code
    return render_template('newsletter/verify.html', verified=True)


@site_bp.route('/<lang>/newsletter/unsubscribe', methods=['GET', 'POST'])
def newsletter_unsubscribe(lang):
    """GET asks for confirmation, POST unsubscribes"""
    token = request.values.get('token', '')
    if request.method == 'GET':
        return render_template('newsletter/unsubscribe.html', token=token, state='confirm')

    try:
        newsletter_service.unsubscribe(token)
    except ApiError as e:
        state = 'already' if e.code == 'ALREADY_UNSUBSCRIBED' else 'error'
        return render_template('newsletter/unsubscribe.html', token=token, state=state), e.status_code
    return render_template('newsletter/unsubscribe.html', token=token, state='done')


# ==========================================
# Preferences
# ==========================================

@site_bp.route('/<lang>/theme', methods=['POST'])
def set_theme(lang):
    theme = request.form.get('theme') or (request.get_json(silent=True) or {}).get('theme')
    if theme not in THEMES:
        abort(400)
    target = url_for('site.home', lang=lang)
    if request.referrer and request.referrer.startswith(request.host_url):
        target = request.referrer
    response = redirect(target, code=303)
    response.set_cookie(THEME_COOKIE, theme, max_age=LOCALE_MAX_AGE, path='/', samesite='Lax')
    return response
