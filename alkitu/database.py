"""
Alkitu Site - Database
Flask-SQLAlchemy handle, table creation and the connectivity check behind /health
"""
import logging
from typing import Tuple

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


db = SQLAlchemy(model_class=Base)


def init_db(app):
    """Bind the app and create any missing tables"""
    db.init_app(app)

    with app.app_context():
        from alkitu.models import db_models  # noqa: F401 registers the tables

        db.create_all()
        logger.info(f"Database ready: {len(db.metadata.tables)} tables")


def check_connection() -> Tuple[bool, str]:
    """(ok, status) where status is 'connected' or a short error string"""
    try:
        db.session.execute(text('SELECT 1'))
        return True, 'connected'
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning(f"Database check failed: {e}")
        return False, f'error: {str(e)[:50]}'
