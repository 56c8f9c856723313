"""
Alkitu Site - Models
"""
from alkitu.models.db_models import (
    DBAuthUser, DBAdminUser, DBUserProfile,
    DBCategory, DBProject, DBProjectCategory,
    DBContactSubmission, DBEmailSettings,
    DBNewsletterSubscriber,
    DBVisitorSession, DBPageView,
    AdminRole, ContactStatus, SubscriberStatus,
)

__all__ = [
    'DBAuthUser', 'DBAdminUser', 'DBUserProfile',
    'DBCategory', 'DBProject', 'DBProjectCategory',
    'DBContactSubmission', 'DBEmailSettings',
    'DBNewsletterSubscriber',
    'DBVisitorSession', 'DBPageView',
    'AdminRole', 'ContactStatus', 'SubscriberStatus',
]
