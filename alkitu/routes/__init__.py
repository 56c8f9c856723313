"""
Alkitu Site - Routes
Blueprint registration
"""
from flask import Flask


def register_routes(app: Flask):
    """Register the public site and all API blueprints"""

    from alkitu.routes.auth import auth_bp
    from alkitu.routes.projects import projects_bp, categories_bp, profiles_bp
    from alkitu.routes.forms import contact_bp, newsletter_bp
    from alkitu.routes.tracking import track_bp, analytics_bp, translations_bp
    from alkitu.routes.admin_content import admin_projects_bp, admin_categories_bp
    from alkitu.routes.admin_inbox import admin_contact_bp, admin_email_settings_bp, admin_newsletter_bp
    from alkitu.routes.admin_team import admin_profiles_bp, admin_users_bp, admin_misc_bp
    from alkitu.routes.pages import site_bp

    # Public API
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(projects_bp, url_prefix='/api/projects')
    app.register_blueprint(categories_bp, url_prefix='/api/categories')
    app.register_blueprint(profiles_bp, url_prefix='/api/profiles')
    app.register_blueprint(contact_bp, url_prefix='/api/contact')
    app.register_blueprint(newsletter_bp, url_prefix='/api/newsletter')
    app.register_blueprint(track_bp, url_prefix='/api/track')
    app.register_blueprint(analytics_bp, url_prefix='/api/analytics')
    app.register_blueprint(translations_bp, url_prefix='/api/translations')

    # Admin API
    app.register_blueprint(admin_projects_bp, url_prefix='/api/admin/projects')
    app.register_blueprint(admin_categories_bp, url_prefix='/api/admin/categories')
    app.register_blueprint(admin_contact_bp, url_prefix='/api/admin/contact-submissions')
    app.register_blueprint(admin_email_settings_bp, url_prefix='/api/admin/email-settings')
    app.register_blueprint(admin_newsletter_bp, url_prefix='/api/admin/newsletter-subscribers')
    app.register_blueprint(admin_profiles_bp, url_prefix='/api/admin/profiles')
    app.register_blueprint(admin_users_bp, url_prefix='/api/admin/users')
    app.register_blueprint(admin_misc_bp, url_prefix='/api/admin')

    # Server-rendered pages
    app.register_blueprint(site_bp)
