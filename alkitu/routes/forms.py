"""
Alkitu Site - Public Form Routes
Contact form and newsletter double opt-in
"""
import logging
import math

from flask import Blueprint, request

from alkitu.errors import RateLimitExceeded, ValidationFailed, api_success
from alkitu.schemas import validate_payload
from alkitu.schemas.forms import ContactForm, NewsletterSubscribe, NewsletterUnsubscribe
from alkitu.services.contact_service import contact_service
from alkitu.services.newsletter_service import newsletter_service
from alkitu.services.rate_limiter import RateLimitResult, form_limiter
from alkitu.utils import get_client_ip

logger = logging.getLogger(__name__)

contact_bp = Blueprint('contact', __name__)
newsletter_bp = Blueprint('newsletter', __name__)

INVALID_DATA = 'Datos inválidos / Invalid data'

LIMIT_DETAILS = {
    'contact': (
        'Has alcanzado el límite de {limit} envíos por hora. Inténtalo de nuevo en {minutes} minutos. / '
        'You have reached the limit of {limit} submissions per hour. Try again in {minutes} minutes.'
    ),
    'newsletter': (
        'Has alcanzado el límite de {limit} suscripciones por hora. Inténtalo de nuevo en {minutes} minutos. / '
        'You have reached the limit of {limit} subscriptions per hour. Try again in {minutes} minutes.'
    ),
}


def _enforce_limit(name: str) -> RateLimitResult:
    """Count this request against the form's limiter; 429 once the window is used up"""
    result = form_limiter(name).check(get_client_ip(request))
    if not result.allowed:
        minutes = max(1, math.ceil(result.reset_in / 60))
        raise RateLimitExceeded(
            'Demasiadas solicitudes / Too many requests',
            details={
                'message': LIMIT_DETAILS[name].format(limit=result.limit, minutes=minutes),
                'retryAfter': result.retry_after
            },
            headers=result.headers(include_retry_after=True)
        )
    return result


# ==========================================
# Contact
# ==========================================

@contact_bp.route('/submit', methods=['POST'])
def submit_contact():
    """
    Public contact form

    POST /api/contact/submit
    {
        "name": "Ana Pérez",
        "email": "ana@example.com",
        "subject": "Nuevo sitio web",
        "message": "Quisiera una cotización...",
        "locale": "es"
    }
    """
    limit = _enforce_limit('contact')
    form = validate_payload(ContactForm, request.get_json(silent=True), message=INVALID_DATA)

    result = contact_service.submit(
        form.model_dump(),
        ip_address=get_client_ip(request),
        user_agent=request.headers.get('User-Agent', 'unknown'),
        form_url=request.headers.get('Referer') or request.headers.get('Origin') or 'unknown'
    )

    message = ('Formulario enviado exitosamente. Te contactaremos pronto.' if form.locale == 'es'
               else 'Form submitted successfully. We will contact you soon.')
    return api_success({
        'status': result.submission.status,
        'submittedAt': result.submission.to_dict()['created_at'],
        'notifications': {
            'admin': result.admin_notification.value,
            'confirmation': result.confirmation.value
        }
    }, message, status=201, headers=limit.headers())


# ==========================================
# Newsletter
# ==========================================

@newsletter_bp.route('/subscribe', methods=['POST'])
def subscribe():
    """
    Start a double opt-in subscription

    POST /api/newsletter/subscribe
    {"email": "ana@example.com", "locale": "es"}
    """
    limit = _enforce_limit('newsletter')
    data = validate_payload(NewsletterSubscribe, request.get_json(silent=True), message=INVALID_DATA)

    result = newsletter_service.subscribe(
        data.email,
        data.locale,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get('User-Agent', 'unknown')
    )

    if result.created:
        message = ('¡Suscripción exitosa! Por favor revisa tu correo electrónico para confirmar.'
                   if data.locale == 'es' else 'Subscription successful! Please check your email to confirm.')
        status = 201
    else:
        message = ('¡Suscripción reenviada! Por favor revisa tu correo electrónico para confirmar.'
                   if data.locale == 'es' else 'Subscription resent! Please check your email to confirm.')
        status = 200

    return api_success({
        'email': result.subscriber.email,
        'status': result.subscriber.status,
        'notification': result.notification.value
    }, message, status=status, headers=limit.headers())


@newsletter_bp.route('/verify/<token>', methods=['GET'])
def verify(token):
    subscriber, outcome = newsletter_service.verify(token)
    message = ('¡Suscripción verificada! Bienvenido al boletín de Alkitu.' if subscriber.locale == 'es'
               else 'Subscription verified! Welcome to the Alkitu newsletter.')
    return api_success({
        'email': subscriber.email,
        'status': subscriber.status,
        'notification': outcome.value
    }, message)


@newsletter_bp.route('/unsubscribe/<token>', methods=['POST'])
def unsubscribe(token):
    """Body is optional: {"exitTime": "2025-01-01T10:00:00Z"}"""
    try:
        exit_time = validate_payload(NewsletterUnsubscribe, request.get_json(silent=True)).exitTime
    except ValidationFailed as e:
        logger.debug(f"Ignoring unsubscribe body: {e.details}")
        exit_time = None
    subscriber, outcome = newsletter_service.unsubscribe(token, exit_time)
    message = ('Te has dado de baja exitosamente del boletín. Sentimos verte partir.' if subscriber.locale == 'es'
               else 'You have successfully unsubscribed from the newsletter. Sorry to see you go.')
    return api_success({
        'email': subscriber.email,
        'status': subscriber.status,
        'notification': outcome.value
    }, message)
