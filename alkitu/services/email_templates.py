"""
Alkitu Site - Email Templates
Localized HTML bodies for newsletter and contact emails
"""
from datetime import datetime, timezone
from html import escape
from typing import Dict, Tuple

BRAND_COLOR = '#00BB31'

SUBJECTS = {
    'verification': {
        'es': '📬 Confirma tu suscripción al boletín de Alkitu',
        'en': '📬 Confirm your subscription to the Alkitu newsletter',
    },
    'welcome': {
        'es': '🎉 ¡Bienvenido al boletín de Alkitu!',
        'en': '🎉 Welcome to the Alkitu newsletter!',
    },
    'goodbye': {
        'es': '👋 Te hemos dado de baja del boletín de Alkitu',
        'en': '👋 You have been unsubscribed from the Alkitu newsletter',
    },
    'contact_confirmation': {
        'es': '¡Gracias por contactarnos! - Alkitu',
        'en': 'Thank you for contacting us! - Alkitu',
    },
}

COPY = {
    'verification': {
        'en': {
            'title': '📬 Confirm Your Subscription',
            'subtitle': "You're almost there! Just one more step",
            'greeting': 'Hello!',
            'body': [
                "Thank you for subscribing to the <strong>Alkitu newsletter</strong>. "
                "We're excited to share our latest projects, insights, and updates with you!",
                'To complete your subscription, please confirm your email address by clicking the button below:',
            ],
            'button': '✅ Confirm Subscription',
            'note': "<strong>Note:</strong> If you didn't subscribe to our newsletter, you can safely ignore this email.",
        },
        'es': {
            'title': '📬 Confirma tu Suscripción',
            'subtitle': '¡Ya casi estás! Solo falta un paso más',
            'greeting': '¡Hola!',
            'body': [
                'Gracias por suscribirte al <strong>newsletter de Alkitu</strong>. '
                '¡Estamos emocionados de compartir nuestros últimos proyectos, ideas y actualizaciones contigo!',
                'Para completar tu suscripción, por favor confirma tu dirección de correo haciendo clic en el botón de abajo:',
            ],
            'button': '✅ Confirmar Suscripción',
            'note': '<strong>Nota:</strong> Si no te suscribiste a nuestro newsletter, puedes ignorar este correo de forma segura.',
        },
    },
    'welcome': {
        'en': {
            'title': '🎉 Welcome to Alkitu!',
            'subtitle': 'Your subscription is confirmed',
            'greeting': 'Hello!',
            'body': [
                'Your email has been verified and you are now subscribed to the <strong>Alkitu newsletter</strong>.',
                "You'll receive our latest projects, articles and news straight to your inbox.",
            ],
            'button': '🌐 Visit Alkitu',
            'note': 'You can unsubscribe at any time using the link below.',
        },
        'es': {
            'title': '🎉 ¡Bienvenido a Alkitu!',
            'subtitle': 'Tu suscripción está confirmada',
            'greeting': '¡Hola!',
            'body': [
                'Tu correo ha sido verificado y ya estás suscrito al <strong>newsletter de Alkitu</strong>.',
                'Recibirás nuestros últimos proyectos, artículos y novedades directamente en tu bandeja de entrada.',
            ],
            'button': '🌐 Visitar Alkitu',
            'note': 'Puedes darte de baja en cualquier momento usando el enlace de abajo.',
        },
    },
    'goodbye': {
        'en': {
            'title': '👋 Sorry to see you go',
            'subtitle': 'You have been unsubscribed',
            'greeting': 'Hello,',
            'body': [
                'We have removed your email from the <strong>Alkitu newsletter</strong>. You will not receive any more emails from us.',
                'If this was a mistake, you can subscribe again at any time from our website.',
            ],
            'button': '🔄 Subscribe again',
            'note': 'Thank you for having been part of our community.',
        },
        'es': {
            'title': '👋 Lamentamos verte partir',
            'subtitle': 'Te has dado de baja',
            'greeting': 'Hola,',
            'body': [
                'Hemos eliminado tu correo del <strong>newsletter de Alkitu</strong>. No recibirás más correos de nuestra parte.',
                'Si fue un error, puedes volver a suscribirte en cualquier momento desde nuestro sitio web.',
            ],
            'button': '🔄 Suscribirme de nuevo',
            'note': 'Gracias por haber sido parte de nuestra comunidad.',
        },
    },
}

FOOTER = {
    'en': ('This is an automated email. Please do not reply to this message.',
           'Alkitu. All rights reserved.', 'Unsubscribe'),
    'es': ('Este es un correo automatizado. Por favor no respondas a este mensaje.',
           'Alkitu. Todos los derechos reservados.', 'Darse de baja'),
}


def _locale(locale: str) -> str:
    return 'es' if locale == 'es' else 'en'


def _layout(locale: str, title: str, subtitle: str, content: str, unsubscribe_url: str = None) -> str:
    automated, rights, unsubscribe_label = FOOTER[_locale(locale)]
    year = datetime.now(timezone.utc).year
    unsubscribe = ''
    if unsubscribe_url:
        unsubscribe = f'<p style="color: #999; font-size: 12px;"><a href="{unsubscribe_url}" style="color: #999;">{unsubscribe_label}</a></p>'
    return f"""
        <html>
        <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background: #f6f9fc;">
            <div style="background: #fff; border-radius: 8px; padding: 32px;">
                <h1 style="color: #111; font-size: 24px; margin: 0;">{title}</h1>
                <p style="color: #666; margin-top: 8px;">{subtitle}</p>
                <hr style="border: none; border-top: 1px solid #eee; margin: 24px 0;">
                {content}
                <hr style="border: none; border-top: 1px solid #eee; margin: 24px 0;">
                <p style="color: #999; font-size: 12px;">{automated}</p>
                <p style="color: #999; font-size: 12px;">© {year} {rights}</p>
                {unsubscribe}
            </div>
        </body>
        </html>
        """


def _button(href: str, label: str) -> str:
    return f"""
                <div style="text-align: center; margin: 32px 0;">
                    <a href="{href}" style="display: inline-block; padding: 12px 24px; background: {BRAND_COLOR}; color: #fff; text-decoration: none; border-radius: 6px; font-weight: bold;">
                        {label}
                    </a>
                </div>
        """


def _newsletter_email(kind: str, locale: str, button_url: str, unsubscribe_url: str = None) -> Tuple[str, str]:
    loc = _locale(locale)
    copy = COPY[kind][loc]
    paragraphs = ''.join(f'<p style="color: #333; line-height: 1.6;">{p}</p>' for p in copy['body'])
    content = f"""
                <p style="color: #333; font-size: 16px;">{copy['greeting']}</p>
                {paragraphs}
                {_button(button_url, copy['button'])}
                <p style="color: #666; font-size: 13px; word-break: break-all;"><a href="{button_url}" style="color: {BRAND_COLOR};">{button_url}</a></p>
                <p style="color: #666; font-size: 13px;">{copy['note']}</p>
        """
    return SUBJECTS[kind][loc], _layout(loc, copy['title'], copy['subtitle'], content, unsubscribe_url)


def verification_email(locale: str, verification_url: str) -> Tuple[str, str]:
    """(subject, html) for the double opt-in confirmation"""
    return _newsletter_email('verification', locale, verification_url)


def welcome_email(locale: str, site_url: str, unsubscribe_url: str) -> Tuple[str, str]:
    return _newsletter_email('welcome', locale, site_url, unsubscribe_url)


def goodbye_email(locale: str, subscribe_url: str) -> Tuple[str, str]:
    return _newsletter_email('goodbye', locale, subscribe_url)


def contact_notification_email(submission: Dict) -> Tuple[str, str]:
    """Admin notification; always Spanish, user content escaped"""
    subject = f"Nuevo mensaje de contacto: {submission['subject']}"
    rows = [
        ('Nombre', submission['name']),
        ('Email', submission['email']),
        ('Asunto', submission['subject']),
        ('Idioma', submission.get('locale', 'es')),
        ('Página', submission.get('form_url') or 'unknown'),
        ('IP', submission.get('ip_address') or 'unknown'),
    ]
    table = ''.join(
        f'<tr><td style="padding: 8px; color: #666; width: 120px;">{label}</td>'
        f'<td style="padding: 8px; color: #111;">{escape(str(value))}</td></tr>'
        for label, value in rows
    )
    message = escape(submission['message']).replace('\n', '<br>')
    content = f"""
                <table style="width: 100%; border-collapse: collapse;">{table}</table>
                <div style="margin-top: 20px; padding: 16px; border-left: 3px solid {BRAND_COLOR}; background: #fafafa; color: #333; line-height: 1.6;">
                    {message}
                </div>
        """
    html = _layout('es', '📩 Nuevo mensaje de contacto', 'Recibido desde el formulario de alkitu.com', content)
    return subject, html


def contact_confirmation_email(locale: str, name: str, subject_line: str, message: str) -> Tuple[str, str]:
    loc = _locale(locale)
    safe_name = escape(name)
    quoted = escape(message).replace('\n', '<br>')
    if loc == 'es':
        title = '✅ ¡Mensaje recibido!'
        subtitle = 'Gracias por ponerte en contacto con nosotros'
        body = (f'<p style="color: #333;">Hola {safe_name},</p>'
                f'<p style="color: #333; line-height: 1.6;">Hemos recibido tu mensaje sobre <strong>{escape(subject_line)}</strong>. '
                'Nuestro equipo lo revisará y te responderá lo antes posible, normalmente en 24-48 horas.</p>'
                '<p style="color: #666;">Tu mensaje:</p>')
    else:
        title = '✅ Message received!'
        subtitle = 'Thank you for getting in touch'
        body = (f'<p style="color: #333;">Hello {safe_name},</p>'
                f'<p style="color: #333; line-height: 1.6;">We have received your message about <strong>{escape(subject_line)}</strong>. '
                'Our team will review it and get back to you as soon as possible, usually within 24-48 hours.</p>'
                '<p style="color: #666;">Your message:</p>')
    content = f"""
                {body}
                <div style="padding: 16px; border-left: 3px solid {BRAND_COLOR}; background: #fafafa; color: #333;">{quoted}</div>
        """
    return SUBJECTS['contact_confirmation'][loc], _layout(loc, title, subtitle, content)
