"""
Alkitu Site - Notification Outcomes
Best-effort email delivery after a committed state change
"""
import logging
from enum import Enum
from typing import Callable

from alkitu.services.email_service import EmailDeliveryError

logger = logging.getLogger(__name__)


class NotificationOutcome(str, Enum):
    SENT = 'sent'
    SKIPPED = 'skipped'   # no transport configured
    FAILED = 'failed'


def deliver(send: Callable[[], bool], description: str) -> NotificationOutcome:
    """Run a send callable; transport failures are logged, not raised"""
    try:
        sent = send()
    except EmailDeliveryError as e:
        logger.error(f"Notification failed ({description}): {e}")
        return NotificationOutcome.FAILED
    if not sent:
        logger.warning(f"Notification skipped ({description})")
        return NotificationOutcome.SKIPPED
    return NotificationOutcome.SENT
