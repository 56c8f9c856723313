"""
Alkitu Site - Contact Service
Stores contact form submissions and notifies the team and the sender
"""
import logging
from dataclasses import dataclass
from typing import Dict, List

from flask import current_app
from sqlalchemy import or_

from alkitu.database import db
from alkitu.errors import NotFoundError
from alkitu.models.db_models import DBContactSubmission, DBEmailSettings, ContactStatus
from alkitu.services import email_templates
from alkitu.services.email_service import email_service
from alkitu.services.notifications import NotificationOutcome, deliver

logger = logging.getLogger(__name__)


@dataclass
class ContactResult:
    submission: DBContactSubmission
    admin_notification: NotificationOutcome
    confirmation: NotificationOutcome


class ContactService:
    """Contact form intake and admin management"""

    def submit(self, form: Dict, ip_address: str, user_agent: str, form_url: str) -> ContactResult:
        """Persist a validated submission, then send both notifications best-effort"""
        submission = DBContactSubmission(
            name=form['name'],
            email=form['email'],
            subject=form['subject'],
            message=form['message'],
            locale=form.get('locale', 'es'),
            status=ContactStatus.PENDING,
            ip_address=ip_address,
            user_agent=user_agent,
            form_url=form_url
        )
        db.session.add(submission)
        db.session.commit()
        logger.info(f"Contact submission stored from {submission.email}")

        settings = self.get_email_settings()
        from_email = settings.from_email if settings else current_app.config.get('EMAIL_FROM')
        to_emails = list(settings.to_emails or []) if settings else [from_email]
        cc_emails = list(settings.cc_emails or []) if settings else []
        bcc_emails = list(settings.bcc_emails or []) if settings else []

        subject, html = email_templates.contact_notification_email(submission.to_dict())
        admin_outcome = deliver(
            lambda: email_service.send_email(to_emails, subject, html, cc=cc_emails, bcc=bcc_emails,
                                             reply_to=submission.email, from_email=from_email),
            f"contact notification for {submission.email}"
        )

        subject, html = email_templates.contact_confirmation_email(
            submission.locale, submission.name, submission.subject, submission.message
        )
        confirmation_outcome = deliver(
            lambda: email_service.send_email([submission.email], subject, html, from_email=from_email),
            f"contact confirmation to {submission.email} ({submission.locale})"
        )

        return ContactResult(submission, admin_outcome, confirmation_outcome)

    # ==========================================
    # Admin
    # ==========================================

    def list_submissions(self, page: int = 1, per_page: int = 10, sort_order: str = 'desc',
                         search: str = None, status: str = 'all') -> Dict:
        query = DBContactSubmission.query
        if search:
            pattern = f'%{search}%'
            query = query.filter(or_(
                DBContactSubmission.name.ilike(pattern),
                DBContactSubmission.email.ilike(pattern),
                DBContactSubmission.subject.ilike(pattern),
            ))
        if status and status != 'all':
            query = query.filter(DBContactSubmission.status == status)

        total = query.count()
        order = DBContactSubmission.created_at.asc() if sort_order == 'asc' else DBContactSubmission.created_at.desc()
        rows = query.order_by(order).offset((page - 1) * per_page).limit(per_page).all()
        return {
            'submissions': [s.to_dict() for s in rows],
            'pagination': {
                'total': total,
                'page': page,
                'perPage': per_page,
                'totalPages': (total + per_page - 1) // per_page
            }
        }

    def _get_or_404(self, submission_id: str) -> DBContactSubmission:
        submission = db.session.get(DBContactSubmission, submission_id)
        if submission is None:
            raise NotFoundError('Contact submission not found')
        return submission

    def update_status(self, submission_id: str, status: str) -> DBContactSubmission:
        submission = self._get_or_404(submission_id)
        submission.status = status
        db.session.commit()
        return submission

    def delete_submission(self, submission_id: str) -> Dict:
        submission = self._get_or_404(submission_id)
        data = {'id': submission.id, 'email': submission.email}
        db.session.delete(submission)
        db.session.commit()
        return data

    # ==========================================
    # Email settings
    # ==========================================

    def get_email_settings(self) -> DBEmailSettings:
        return DBEmailSettings.query.order_by(DBEmailSettings.created_at.asc()).first()

    def save_email_settings(self, values: Dict) -> DBEmailSettings:
        settings = self.get_email_settings()
        if settings is None:
            settings = DBEmailSettings(from_email=values['from_email'])
            db.session.add(settings)
        settings.from_email = values['from_email']
        settings.to_emails = list(values.get('to_emails') or [])
        settings.cc_emails = list(values.get('cc_emails') or [])
        settings.bcc_emails = list(values.get('bcc_emails') or [])
        settings.email_domain = values.get('email_domain')
        db.session.commit()
        logger.info("Contact email settings updated")
        return settings

    def find_test_submissions(self, patterns: List[str]) -> List[DBContactSubmission]:
        """Submissions whose name, email or subject contains any pattern"""
        conditions = []
        for pattern in patterns:
            like = f'%{pattern}%'
            conditions.extend([
                DBContactSubmission.name.ilike(like),
                DBContactSubmission.email.ilike(like),
                DBContactSubmission.subject.ilike(like),
            ])
        if not conditions:
            return []
        return DBContactSubmission.query.filter(or_(*conditions)).order_by(DBContactSubmission.created_at.desc()).all()


contact_service = ContactService()
