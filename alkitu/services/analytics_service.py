"""
Alkitu Site - Analytics Service
Anonymous visitor sessions, page views and the admin summary
"""
import ipaddress
import logging
from datetime import timedelta
from typing import Dict, Optional

import requests
from flask import current_app
from sqlalchemy import func

from alkitu.database import db
from alkitu.errors import BadRequestError, NotFoundError
from alkitu.models.db_models import DBPageView, DBVisitorSession, utcnow
from alkitu.services.newsletter_service import newsletter_service
from alkitu.utils import is_uuid

logger = logging.getLogger(__name__)

GEO_FIELDS = 'status,countryCode,regionName,city,lat,lon'


def is_public_ip(ip: Optional[str]) -> bool:
    """False for unknown, loopback, private and otherwise non-routable addresses"""
    if not ip or ip == 'unknown':
        return False
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return address.is_global


class AnalyticsService:
    """Sessions are reused per fingerprint while active within the session window"""

    def _window_start(self):
        minutes = current_app.config.get('ANALYTICS_SESSION_WINDOW_MINUTES', 60)
        return utcnow() - timedelta(minutes=minutes)

    def find_active_session(self, fingerprint: str) -> Optional[DBVisitorSession]:
        return (DBVisitorSession.query
                .filter(DBVisitorSession.session_fingerprint == fingerprint,
                        DBVisitorSession.last_activity_at >= self._window_start())
                .order_by(DBVisitorSession.last_activity_at.desc())
                .first())

    # ==========================================
    # Geo lookup
    # ==========================================

    def lookup_geo(self, ip: str) -> Dict:
        """
        Resolve country/region/city/coordinates for an IP.

        Returns an empty dict when disabled, for local addresses, or when the
        lookup service fails; tracking never depends on it.
        """
        if not current_app.config.get('GEO_LOOKUP_ENABLED') or not is_public_ip(ip):
            return {}

        url = current_app.config['GEO_LOOKUP_URL'].format(ip=ip)
        try:
            response = requests.get(
                url,
                params={'fields': GEO_FIELDS},
                timeout=current_app.config.get('GEO_LOOKUP_TIMEOUT', 3)
            )
            data = response.json() if response.status_code == 200 else {}
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Geo lookup failed for {ip}: {e}")
            return {}

        if data.get('status') != 'success':
            return {}
        geo = {
            'country': data.get('countryCode'),
            'region': data.get('regionName'),
            'city': data.get('city'),
            'latitude': data.get('lat'),
            'longitude': data.get('lon'),
        }
        return {k: v for k, v in geo.items() if v is not None}

    # ==========================================
    # Tracking
    # ==========================================

    def track_page_view(self, fingerprint: str, page_path: str, locale: str, referrer: str,
                        ip: str, user_agent: str) -> DBPageView:
        session = self.find_active_session(fingerprint)
        if session is None:
            session = DBVisitorSession(
                session_fingerprint=fingerprint,
                ip_address=ip,
                user_agent=user_agent or 'unknown'
            )
            db.session.add(session)
            db.session.flush()
        else:
            session.last_activity_at = utcnow()
            session.ip_address = ip

        page_view = DBPageView(session_id=session.id, page_path=page_path,
                               locale=locale, referrer=referrer or '')
        db.session.add(page_view)
        db.session.commit()
        return page_view

    def track_page_exit(self, page_view_id: str, time_on_page: int) -> DBPageView:
        page_view = db.session.get(DBPageView, page_view_id)
        if page_view is None:
            raise NotFoundError('Page view not found')
        page_view.exit_time = utcnow()
        page_view.time_on_page_seconds = time_on_page
        db.session.commit()
        return page_view

    def upsert_session(self, fingerprint: str, ip: str, user_agent: str):
        """
        Refresh the active session for a fingerprint or start a new one.

        Returns:
            (session, created)
        """
        geo = self.lookup_geo(ip)
        session = self.find_active_session(fingerprint)
        created = session is None

        if created:
            session = DBVisitorSession(
                session_fingerprint=fingerprint,
                ip_address=ip,
                user_agent=user_agent or 'unknown',
                **geo
            )
            db.session.add(session)
        else:
            session.last_activity_at = utcnow()
            session.ip_address = ip
            for field, value in geo.items():
                setattr(session, field, value)

        db.session.commit()
        logger.info(f"Analytics session {'created' if created else 'refreshed'}: {session.id}")
        return session, created

    def create_page_view(self, session_id: str, page_path: str, locale: str, referrer: str = '') -> DBPageView:
        if db.session.get(DBVisitorSession, session_id) is None:
            raise NotFoundError('Session not found')
        page_view = DBPageView(session_id=session_id, page_path=page_path,
                               locale=locale, referrer=referrer or '')
        db.session.add(page_view)
        db.session.commit()
        return page_view

    def update_page_view(self, page_view_id: str, time_on_page: Optional[int] = None) -> DBPageView:
        if not is_uuid(page_view_id):
            raise BadRequestError('Invalid page view ID format', code='INVALID_ID')
        page_view = db.session.get(DBPageView, page_view_id)
        if page_view is None:
            raise NotFoundError('Page view not found')

        now = utcnow()
        if time_on_page is None:
            time_on_page = max(0, int((now - page_view.entry_time).total_seconds()))
        page_view.exit_time = now
        page_view.time_on_page_seconds = time_on_page
        db.session.commit()
        return page_view

    # ==========================================
    # Admin summary
    # ==========================================

    def summary(self, days: int = 30, top: int = 10) -> Dict:
        since = utcnow() - timedelta(days=days)

        sessions = (db.session.query(func.count(DBVisitorSession.id))
                    .filter(DBVisitorSession.started_at >= since).scalar()) or 0
        visitors = (db.session.query(func.count(func.distinct(DBVisitorSession.session_fingerprint)))
                    .filter(DBVisitorSession.started_at >= since).scalar()) or 0
        page_views = (db.session.query(func.count(DBPageView.id))
                      .filter(DBPageView.entry_time >= since).scalar()) or 0
        avg_time = (db.session.query(func.avg(DBPageView.time_on_page_seconds))
                    .filter(DBPageView.entry_time >= since,
                            DBPageView.time_on_page_seconds.isnot(None)).scalar())

        top_pages = (db.session.query(DBPageView.page_path, func.count(DBPageView.id).label('views'))
                     .filter(DBPageView.entry_time >= since)
                     .group_by(DBPageView.page_path)
                     .order_by(func.count(DBPageView.id).desc(), DBPageView.page_path.asc())
                     .limit(top).all())
        top_countries = (db.session.query(DBVisitorSession.country, func.count(DBVisitorSession.id))
                         .filter(DBVisitorSession.started_at >= since,
                                 DBVisitorSession.country.isnot(None))
                         .group_by(DBVisitorSession.country)
                         .order_by(func.count(DBVisitorSession.id).desc(), DBVisitorSession.country.asc())
                         .limit(top).all())
        locales = (db.session.query(DBPageView.locale, func.count(DBPageView.id))
                   .filter(DBPageView.entry_time >= since)
                   .group_by(DBPageView.locale).all())

        return {
            'days': days,
            'sessions': sessions,
            'uniqueVisitors': visitors,
            'pageViews': page_views,
            'avgTimeOnPageSeconds': round(float(avg_time), 1) if avg_time is not None else 0,
            'topPages': [{'pagePath': path, 'views': views} for path, views in top_pages],
            'topCountries': [{'country': country, 'sessions': count} for country, count in top_countries],
            'pageViewsByLocale': {locale or 'unknown': count for locale, count in locales},
            'newsletter': newsletter_service.counts_by_status()
        }


analytics_service = AnalyticsService()
