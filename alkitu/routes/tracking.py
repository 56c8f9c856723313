"""
Alkitu Site - Tracking Routes
Anonymous page view tracking, analytics sessions and translations
"""
from flask import Blueprint, request

from alkitu.errors import BadRequestError, api_success
from alkitu.i18n import is_supported, load_translations, supported_locales
from alkitu.schemas import validate_payload
from alkitu.schemas.analytics import (
    PageViewCreate, PageViewUpdate, SessionUpsert, TrackEvent, TrackPageView
)
from alkitu.services.analytics_service import analytics_service
from alkitu.utils import get_client_ip

track_bp = Blueprint('track', __name__)
analytics_bp = Blueprint('analytics', __name__)
translations_bp = Blueprint('translations', __name__)


@track_bp.route('', methods=['POST'])
def track():
    """
    Record a page view or a page exit

    POST /api/track
    {"action": "page_view", "sessionFingerprint": "...", "pagePath": "/es", "locale": "es"}
    {"action": "page_exit", "sessionFingerprint": "...", "pageViewId": "<uuid>", "timeOnPage": 42}
    """
    event = validate_payload(TrackEvent, request.get_json(silent=True)).root

    if isinstance(event, TrackPageView):
        page_view = analytics_service.track_page_view(
            event.sessionFingerprint,
            event.pagePath,
            event.locale,
            event.referrer,
            ip=get_client_ip(request),
            user_agent=request.headers.get('User-Agent', 'unknown')
        )
        return api_success({'pageViewId': page_view.id}, 'Page view tracked successfully', status=201)

    analytics_service.track_page_exit(event.pageViewId, event.timeOnPage)
    return api_success(None, 'Page exit tracked successfully')


# ==========================================
# Sessions & page views
# ==========================================

@analytics_bp.route('/sessions', methods=['POST'])
def upsert_session():
    data = validate_payload(SessionUpsert, request.get_json(silent=True))
    session, created = analytics_service.upsert_session(
        data.sessionFingerprint,
        ip=get_client_ip(request),
        user_agent=request.headers.get('User-Agent', 'unknown')
    )
    if created:
        return api_success({'session': session.to_dict()}, 'Session created successfully', status=201)
    return api_success({'session': session.to_dict()}, 'Session updated successfully')


@analytics_bp.route('/page-views', methods=['POST'])
def create_page_view():
    data = validate_payload(PageViewCreate, request.get_json(silent=True))
    page_view = analytics_service.create_page_view(data.sessionId, data.pagePath, data.locale, data.referrer)
    return api_success({'pageView': page_view.to_dict()}, 'Page view created successfully', status=201)


@analytics_bp.route('/page-views/<page_view_id>', methods=['PATCH'])
def update_page_view(page_view_id):
    data = validate_payload(PageViewUpdate, request.get_json(silent=True))
    page_view = analytics_service.update_page_view(page_view_id, data.timeOnPage)
    return api_success({'pageView': page_view.to_dict()}, 'Page view updated successfully')


# ==========================================
# Translations
# ==========================================

@translations_bp.route('', methods=['GET'])
def get_translations():
    lang = request.args.get('lang')
    if not is_supported(lang):
        options = ', '.join(sorted(supported_locales()))
        raise BadRequestError(f'Invalid language parameter. Must be one of: {options}')
    return api_success({'translations': load_translations(lang)}, 'Translations retrieved successfully')
