"""
Alkitu Site - Services
Business logic, email delivery and external lookups
"""
from alkitu.services.email_service import EmailService, EmailDeliveryError
from alkitu.services.user_service import UserService
from alkitu.services.project_service import ProjectService
from alkitu.services.category_service import CategoryService
from alkitu.services.contact_service import ContactService
from alkitu.services.newsletter_service import NewsletterService
from alkitu.services.profile_service import ProfileService
from alkitu.services.storage_service import StorageService
from alkitu.services.analytics_service import AnalyticsService
from alkitu.services.rate_limiter import FixedWindowRateLimiter

__all__ = [
    'EmailService',
    'EmailDeliveryError',
    'UserService',
    'ProjectService',
    'CategoryService',
    'ContactService',
    'NewsletterService',
    'ProfileService',
    'StorageService',
    'AnalyticsService',
    'FixedWindowRateLimiter',
]
