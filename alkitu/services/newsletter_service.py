"""
Alkitu Site - Newsletter Service
Double opt-in subscription lifecycle: subscribe, verify, unsubscribe
"""
import csv
import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy import func

from alkitu.database import db
from alkitu.errors import ApiError, BadRequestError, ConflictError, NotFoundError
from alkitu.models.db_models import DBNewsletterSubscriber, SubscriberStatus, new_token, utcnow
from alkitu.services import email_templates
from alkitu.services.email_service import email_service
from alkitu.services.notifications import NotificationOutcome, deliver

logger = logging.getLogger(__name__)

TOKEN_LENGTH = 64

EXPORT_HEADER = ['Email', 'Status', 'Locale', 'Created At', 'Verified At', 'Unsubscribed At']


@dataclass
class SubscriptionResult:
    subscriber: DBNewsletterSubscriber
    created: bool
    notification: NotificationOutcome


class NewsletterService:
    """Newsletter subscriptions and the token links sent by email"""

    # ==========================================
    # Links
    # ==========================================

    def _site_url(self) -> str:
        return current_app.config.get('SITE_URL', '').rstrip('/')

    def verification_url(self, subscriber: DBNewsletterSubscriber, locale: str = None) -> str:
        return f"{self._site_url()}/{locale or subscriber.locale}/newsletter/verify?token={subscriber.verification_token}"

    def unsubscribe_url(self, subscriber: DBNewsletterSubscriber) -> str:
        return f"{self._site_url()}/{subscriber.locale}/newsletter/unsubscribe?token={subscriber.unsubscribe_token}"

    # ==========================================
    # Public lifecycle
    # ==========================================

    def subscribe(self, email: str, locale: str, ip_address: str = None,
                  user_agent: str = None) -> SubscriptionResult:
        """
        Subscribe an email address.

        active        -> ConflictError
        pending       -> verification resent (failure raises, nothing else happened)
        unsubscribed/inactive -> reset to pending with a fresh verification token
        unknown       -> new pending row
        """
        existing = DBNewsletterSubscriber.query.filter_by(email=email).first()

        if existing is not None and existing.status == SubscriberStatus.ACTIVE:
            raise ConflictError(
                'Ya estás suscrito / You are already subscribed',
                code='ALREADY_SUBSCRIBED',
                details=('Este correo electrónico ya está suscrito al boletín.' if locale == 'es'
                         else 'This email is already subscribed to the newsletter.')
            )

        if existing is not None and existing.status == SubscriberStatus.PENDING and existing.verification_token:
            outcome = self._send_verification(existing, locale)
            if outcome == NotificationOutcome.FAILED:
                raise ApiError(
                    'Error al reenviar el correo / Error resending email',
                    code='EMAIL_RESEND_FAILED',
                    details='No se pudo reenviar el correo de verificación. / Could not resend verification email.'
                )
            return SubscriptionResult(existing, False, outcome)

        if existing is not None:
            existing.status = SubscriberStatus.PENDING
            existing.locale = locale
            existing.verification_token = new_token()
            existing.verified_at = None
            existing.unsubscribed_at = None
            existing.ip_address = ip_address
            existing.user_agent = user_agent
            subscriber = existing
            logger.info(f"Newsletter re-subscription for {email}")
        else:
            subscriber = DBNewsletterSubscriber(
                email=email,
                locale=locale,
                status=SubscriberStatus.PENDING,
                verification_token=new_token(),
                unsubscribe_token=new_token(),
                ip_address=ip_address,
                user_agent=user_agent
            )
            db.session.add(subscriber)
        db.session.commit()

        outcome = self._send_verification(subscriber, locale)
        return SubscriptionResult(subscriber, True, outcome)

    def verify(self, token: str) -> Tuple[DBNewsletterSubscriber, NotificationOutcome]:
        """Activate the pending subscription owning a verification token (single use)"""
        self._check_token(token, 'El token de verificación no es válido. / The verification token is invalid.')

        subscriber = DBNewsletterSubscriber.query.filter_by(
            verification_token=token, status=SubscriberStatus.PENDING
        ).first()
        if subscriber is None:
            raise NotFoundError(
                'Token inválido / Invalid token',
                code='INVALID_TOKEN',
                details='El token de verificación no es válido o ha expirado. / '
                        'The verification token is invalid or has expired.'
            )

        subscriber.status = SubscriberStatus.ACTIVE
        subscriber.verified_at = utcnow()
        subscriber.verification_token = None
        db.session.commit()
        logger.info(f"Newsletter subscription verified for {subscriber.email}")

        subject, html = email_templates.welcome_email(
            subscriber.locale, f"{self._site_url()}/{subscriber.locale}", self.unsubscribe_url(subscriber)
        )
        outcome = deliver(
            lambda: email_service.send_email([subscriber.email], subject, html),
            f"newsletter welcome to {subscriber.email} ({subscriber.locale})"
        )
        return subscriber, outcome

    def unsubscribe(self, token: str, exit_time: Optional[datetime] = None) -> Tuple[DBNewsletterSubscriber, NotificationOutcome]:
        self._check_token(token, 'El token de baja no es válido. / The unsubscribe token is invalid.')

        subscriber = DBNewsletterSubscriber.query.filter_by(unsubscribe_token=token).first()
        if subscriber is None:
            raise NotFoundError(
                'Token inválido / Invalid token',
                code='INVALID_TOKEN',
                details='El token de baja no es válido. / The unsubscribe token is invalid.'
            )
        if subscriber.status == SubscriberStatus.UNSUBSCRIBED:
            raise NotFoundError(
                'Ya dado de baja / Already unsubscribed',
                code='ALREADY_UNSUBSCRIBED',
                details='Esta suscripción ya fue cancelada. / This subscription was already cancelled.'
            )

        if exit_time is not None and exit_time.tzinfo is not None:
            exit_time = exit_time.astimezone(timezone.utc).replace(tzinfo=None)

        subscriber.status = SubscriberStatus.UNSUBSCRIBED
        subscriber.unsubscribed_at = exit_time or utcnow()
        db.session.commit()
        logger.info(f"Newsletter unsubscribe for {subscriber.email}")

        subject, html = email_templates.goodbye_email(subscriber.locale, f"{self._site_url()}/{subscriber.locale}")
        outcome = deliver(
            lambda: email_service.send_email([subscriber.email], subject, html),
            f"newsletter goodbye to {subscriber.email} ({subscriber.locale})"
        )
        return subscriber, outcome

    def _check_token(self, token: str, details: str):
        if not token or len(token) != TOKEN_LENGTH:
            raise BadRequestError('Token inválido / Invalid token', code='INVALID_TOKEN', details=details)

    def _send_verification(self, subscriber: DBNewsletterSubscriber, locale: str) -> NotificationOutcome:
        subject, html = email_templates.verification_email(locale, self.verification_url(subscriber, locale))
        return deliver(
            lambda: email_service.send_email([subscriber.email], subject, html),
            f"newsletter verification to {subscriber.email} ({locale})"
        )

    # ==========================================
    # Admin
    # ==========================================

    def _filtered_query(self, status: str = 'all', locale: str = 'all', search: str = None):
        query = DBNewsletterSubscriber.query
        if status and status != 'all':
            query = query.filter(DBNewsletterSubscriber.status == status)
        if locale and locale != 'all':
            query = query.filter(DBNewsletterSubscriber.locale == locale)
        if search:
            query = query.filter(DBNewsletterSubscriber.email.ilike(f'%{search}%'))
        return query

    def list_subscribers(self, page: int = 1, limit: int = 20, status: str = 'all',
                         locale: str = 'all', search: str = None) -> Dict:
        query = self._filtered_query(status, locale, search)
        total = query.count()
        rows = (query.order_by(DBNewsletterSubscriber.created_at.desc())
                .offset((page - 1) * limit).limit(limit).all())
        return {
            'subscribers': [s.to_dict() for s in rows],
            'pagination': {
                'total': total,
                'totalPages': (total + limit - 1) // limit,
                'currentPage': page,
                'limit': limit
            }
        }

    def delete_subscriber(self, subscriber_id: str) -> Dict:
        subscriber = db.session.get(DBNewsletterSubscriber, subscriber_id)
        if subscriber is None:
            raise NotFoundError('Subscriber not found')
        data = {'id': subscriber.id, 'email': subscriber.email}
        db.session.delete(subscriber)
        db.session.commit()
        logger.info(f"Newsletter subscriber deleted: {data['email']}")
        return data

    def export_csv(self, status: str = 'all', locale: str = 'all', search: str = None) -> str:
        rows: List[DBNewsletterSubscriber] = (
            self._filtered_query(status, locale, search)
            .order_by(DBNewsletterSubscriber.created_at.desc()).all()
        )
        if not rows:
            raise NotFoundError('No subscribers found to export', code='NO_SUBSCRIBERS')

        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator='\r\n')
        writer.writerow(EXPORT_HEADER)
        for s in rows:
            writer.writerow([
                s.email,
                s.status,
                s.locale,
                s.created_at.isoformat() if s.created_at else '',
                s.verified_at.isoformat() if s.verified_at else '',
                s.unsubscribed_at.isoformat() if s.unsubscribed_at else '',
            ])
        return buffer.getvalue()

    def counts_by_status(self) -> Dict[str, int]:
        rows = (db.session.query(DBNewsletterSubscriber.status, func.count(DBNewsletterSubscriber.id))
                .group_by(DBNewsletterSubscriber.status).all())
        return {status: count for status, count in rows}


newsletter_service = NewsletterService()
