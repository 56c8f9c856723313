"""
Alkitu Site - Category Service
Bilingual project categories
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import func

from alkitu.database import db
from alkitu.errors import BadRequestError, ConflictError, NotFoundError
from alkitu.models.db_models import DBCategory, DBProjectCategory
from alkitu.utils import generate_slug, is_uuid

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGES = {
    'name_en': 'A category with this English name already exists',
    'name_es': 'A category with this Spanish name already exists',
    'slug': 'A category with this slug already exists',
}


class CategoryService:
    """Category CRUD with uniqueness and in-use checks"""

    def list_categories(self, include_count: bool = True) -> List[Dict]:
        rows = DBCategory.query.order_by(DBCategory.name_en.asc()).all()
        return [c.to_dict(include_count=include_count) for c in rows]

    def get(self, category_id: str) -> DBCategory:
        if not is_uuid(category_id):
            raise BadRequestError('Invalid category ID format', code='INVALID_ID')
        category = db.session.get(DBCategory, category_id)
        if category is None:
            raise NotFoundError('Category not found')
        return category

    def create(self, values: Dict) -> DBCategory:
        slug = values.get('slug') or generate_slug(values['name_en'])
        if not slug:
            raise BadRequestError('Could not generate a slug from the English name', code='INVALID_SLUG')
        data = {'name_en': values['name_en'], 'name_es': values['name_es'], 'slug': slug}
        self._check_unique(data)

        category = DBCategory(**data)
        db.session.add(category)
        db.session.commit()
        logger.info(f"Category created: {category.slug}")
        return category

    def update(self, category_id: str, values: Dict) -> DBCategory:
        category = self.get(category_id)

        changes = {}
        if values.get('name_en') is not None:
            changes['name_en'] = values['name_en']
        if values.get('name_es') is not None:
            changes['name_es'] = values['name_es']
        if values.get('slug') is not None:
            changes['slug'] = values['slug']
        elif 'name_en' in changes:
            changes['slug'] = generate_slug(changes['name_en'])

        if not changes:
            raise BadRequestError('No valid fields to update')

        self._check_unique(changes, exclude_id=category.id)
        for field, value in changes.items():
            setattr(category, field, value)
        db.session.commit()
        logger.info(f"Category updated: {category.slug}")
        return category

    def delete(self, category_id: str) -> Dict:
        category = self.get(category_id)
        count = self.usage_count(category.id)
        if count > 0:
            raise BadRequestError(
                f'Cannot delete category. It is used by {count} project(s).',
                code='CATEGORY_IN_USE',
                details={'project_count': count}
            )
        db.session.delete(category)
        db.session.commit()
        logger.info(f"Category deleted: {category_id}")
        return {'id': category_id}

    def usage_count(self, category_id: str) -> int:
        return (db.session.query(func.count(DBProjectCategory.id))
                .filter(DBProjectCategory.category_id == category_id).scalar()) or 0

    def _check_unique(self, values: Dict, exclude_id: Optional[str] = None):
        """Raise DUPLICATE_CATEGORY naming the first field that collides"""
        for field in ('name_en', 'name_es', 'slug'):
            if field not in values:
                continue
            query = DBCategory.query.filter(getattr(DBCategory, field) == values[field])
            if exclude_id:
                query = query.filter(DBCategory.id != exclude_id)
            if query.first() is not None:
                raise ConflictError(DUPLICATE_MESSAGES[field], code='DUPLICATE_CATEGORY', details={'field': field})


category_service = CategoryService()
