"""
Alkitu Site - Admin Inbox Routes
Contact submissions, notification recipients and newsletter subscribers
"""
from datetime import date

from flask import Blueprint, Response, request

from alkitu.errors import BadRequestError, api_success
from alkitu.models.db_models import ContactStatus, SubscriberStatus
from alkitu.routes.auth import admin_required
from alkitu.schemas import validate_payload
from alkitu.schemas.forms import ContactStatusUpdate, EmailSettingsUpdate
from alkitu.services.contact_service import contact_service
from alkitu.services.newsletter_service import newsletter_service
from alkitu.utils import get_pagination_params, is_uuid

admin_contact_bp = Blueprint('admin_contact', __name__)
admin_email_settings_bp = Blueprint('admin_email_settings', __name__)
admin_newsletter_bp = Blueprint('admin_newsletter', __name__)


def _choice(name: str, allowed, default: str = 'all') -> str:
    value = request.args.get(name) or default
    if value != 'all' and value not in allowed:
        raise BadRequestError(f'Invalid {name} filter', code='VALIDATION_ERROR',
                              details=[{'field': name, 'message': f'Must be one of: all, {", ".join(allowed)}',
                                        'code': 'enum'}])
    return value


# ==========================================
# Contact submissions
# ==========================================

@admin_contact_bp.route('', methods=['GET'])
@admin_required
def list_submissions(current_admin):
    """
    GET /api/admin/contact-submissions?page=1&perPage=10&sortOrder=desc&search=ana&status=pending
    """
    page, per_page, _ = get_pagination_params(request, default_limit=10, limit_param='perPage')
    sort_order = 'asc' if request.args.get('sortOrder') == 'asc' else 'desc'
    result = contact_service.list_submissions(
        page=page,
        per_page=per_page,
        sort_order=sort_order,
        search=request.args.get('search'),
        status=_choice('status', ContactStatus.ALL)
    )
    return api_success(result, 'Contact submissions retrieved successfully')


@admin_contact_bp.route('/<submission_id>', methods=['PATCH'])
@admin_required
def update_submission(current_admin, submission_id):
    data = validate_payload(ContactStatusUpdate, request.get_json(silent=True))
    submission = contact_service.update_status(submission_id, data.status)
    return api_success({'submission': submission.to_dict()}, 'Contact submission updated successfully')


@admin_contact_bp.route('/<submission_id>', methods=['DELETE'])
@admin_required
def delete_submission(current_admin, submission_id):
    deleted = contact_service.delete_submission(submission_id)
    return api_success(deleted, 'Contact submission deleted successfully')


# ==========================================
# Email settings
# ==========================================

@admin_email_settings_bp.route('', methods=['GET'])
@admin_required
def get_email_settings(current_admin):
    settings = contact_service.get_email_settings()
    return api_success({'settings': settings.to_dict() if settings else None},
                       'Email settings retrieved successfully')


@admin_email_settings_bp.route('', methods=['PUT'])
@admin_required
def save_email_settings(current_admin):
    """
    Replace the contact notification recipients

    PUT /api/admin/email-settings
    {
        "from_email": "noreply@alkitu.com",
        "to_emails": ["team@alkitu.com"],
        "cc_emails": [],
        "bcc_emails": []
    }
    """
    data = validate_payload(EmailSettingsUpdate, request.get_json(silent=True))
    settings = contact_service.save_email_settings(data.model_dump())
    return api_success({'settings': settings.to_dict()}, 'Email settings updated successfully')


# ==========================================
# Newsletter subscribers
# ==========================================

@admin_newsletter_bp.route('', methods=['GET'])
@admin_required
def list_subscribers(current_admin):
    page, limit, _ = get_pagination_params(request, default_limit=20)
    result = newsletter_service.list_subscribers(
        page=page,
        limit=limit,
        status=_choice('status', SubscriberStatus.ALL),
        locale=_choice('locale', ('es', 'en')),
        search=request.args.get('search')
    )
    return api_success(result, 'Subscribers retrieved successfully')


@admin_newsletter_bp.route('/export', methods=['GET'])
@admin_required
def export_subscribers(current_admin):
    """CSV attachment of the subscribers matching the list filters"""
    content = newsletter_service.export_csv(
        status=_choice('status', SubscriberStatus.ALL),
        locale=_choice('locale', ('es', 'en')),
        search=request.args.get('search')
    )
    filename = f"newsletter-subscribers-{date.today().isoformat()}.csv"
    return Response(
        content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'}
    )


@admin_newsletter_bp.route('/<subscriber_id>', methods=['DELETE'])
@admin_required
def delete_subscriber(current_admin, subscriber_id):
    if not is_uuid(subscriber_id):
        raise BadRequestError('Invalid subscriber ID format', code='INVALID_ID')
    deleted = newsletter_service.delete_subscriber(subscriber_id)
    return api_success(deleted, 'Subscriber deleted successfully')
