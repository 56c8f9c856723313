"""
Alkitu Site - Project Service
Portfolio projects and their category associations
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from alkitu.database import db
from alkitu.errors import BadRequestError, ConflictError, NotFoundError
from alkitu.models.db_models import DBCategory, DBProject, DBProjectCategory
from alkitu.utils import is_uuid, total_pages

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    'created_at': DBProject.created_at,
    'updated_at': DBProject.updated_at,
    'display_order': DBProject.display_order,
    'title_en': DBProject.title_en,
    'title_es': DBProject.title_es,
}

NULLABLE_FIELDS = ('about_en', 'about_es')


class ProjectService:
    """Project CRUD; a project and its associations always change in one commit"""

    def _base_query(self):
        return DBProject.query.options(
            selectinload(DBProject.category_links).selectinload(DBProjectCategory.category)
        )

    def _apply_search(self, query, search: Optional[str]):
        if search:
            pattern = f'%{search}%'
            query = query.filter(or_(
                DBProject.title_en.ilike(pattern),
                DBProject.title_es.ilike(pattern),
                DBProject.description_en.ilike(pattern),
                DBProject.description_es.ilike(pattern),
            ))
        return query

    def _page(self, query, page: int, limit: int, order_by) -> Dict:
        total = query.count()
        rows = query.order_by(order_by).offset((page - 1) * limit).limit(limit).all()
        return {
            'projects': [p.to_dict() for p in rows],
            'pagination': {
                'total': total,
                'page': page,
                'limit': limit,
                'total_pages': total_pages(total, limit)
            }
        }

    # ==========================================
    # Public
    # ==========================================

    def list_public(self, page: int = 1, limit: int = 20, category_slug: str = None,
                    search: str = None) -> Dict:
        """Active projects by display_order; an unknown category slug applies no filter"""
        query = self._base_query().filter(DBProject.is_active == True)
        if category_slug:
            category = DBCategory.query.filter_by(slug=category_slug).first()
            if category is not None:
                query = query.filter(DBProject.category_links.any(DBProjectCategory.category_id == category.id))
        query = self._apply_search(query, search)
        return self._page(query, page, limit, DBProject.display_order.asc())

    def get_public(self, slug: str) -> DBProject:
        project = self._base_query().filter(DBProject.slug == slug, DBProject.is_active == True).first()
        if project is None:
            raise NotFoundError('Project not found')
        return project

    # ==========================================
    # Admin
    # ==========================================

    def list_admin(self, page: int = 1, limit: int = 20, category_id: str = None,
                   is_active: Optional[bool] = None, search: str = None,
                   sort_by: str = 'display_order', sort_order: str = 'asc') -> Dict:
        query = self._base_query()
        if category_id:
            query = query.filter(DBProject.category_links.any(DBProjectCategory.category_id == category_id))
        if is_active is not None:
            query = query.filter(DBProject.is_active == is_active)
        query = self._apply_search(query, search)
        column = SORTABLE_FIELDS.get(sort_by, DBProject.display_order)
        order_by = column.desc() if sort_order == 'desc' else column.asc()
        return self._page(query, page, limit, order_by)

    def get(self, project_id: str) -> DBProject:
        if not is_uuid(project_id):
            raise BadRequestError('Invalid project ID format', code='INVALID_ID')
        project = self._base_query().filter(DBProject.id == project_id).first()
        if project is None:
            raise NotFoundError('Project not found')
        return project

    def create(self, values: Dict) -> DBProject:
        values = dict(values)
        category_ids = values.pop('category_ids')
        self._check_slug_free(values['slug'])
        categories = self._load_categories(category_ids)

        project = DBProject(**values)
        project.category_links = [DBProjectCategory(category=c) for c in categories]
        db.session.add(project)
        db.session.commit()
        logger.info(f"Project created: {project.slug}")
        return project

    def update(self, project_id: str, values: Dict) -> DBProject:
        project = self.get(project_id)
        values = dict(values)
        category_ids = values.pop('category_ids', None)

        if 'slug' in values and values['slug'] != project.slug:
            self._check_slug_free(values['slug'])
        if category_ids is not None:
            categories = self._load_categories(category_ids)
            project.category_links = [DBProjectCategory(category=c) for c in categories]

        for field, value in values.items():
            if value is None and field not in NULLABLE_FIELDS:
                continue
            setattr(project, field, value)
        db.session.commit()
        logger.info(f"Project updated: {project.slug}")
        return project

    def delete(self, project_id: str) -> Dict:
        project = self.get(project_id)
        data = {'id': project.id, 'slug': project.slug}
        db.session.delete(project)
        db.session.commit()
        logger.info(f"Project deleted: {data['slug']}")
        return data

    def _check_slug_free(self, slug: str):
        if DBProject.query.filter_by(slug=slug).first() is not None:
            raise ConflictError('A project with this slug already exists', code='DUPLICATE_SLUG',
                                details={'field': 'slug'})

    def _load_categories(self, category_ids: List[str]) -> List[DBCategory]:
        """Resolve ids in request order; any invalid or unknown id is a 400"""
        unique_ids = list(dict.fromkeys(category_ids))
        invalid = [cid for cid in unique_ids if not is_uuid(cid)]
        if invalid:
            raise BadRequestError('Invalid category ID format', code='INVALID_CATEGORY', details={'category_ids': invalid})
        found = {c.id: c for c in DBCategory.query.filter(DBCategory.id.in_(unique_ids)).all()} if unique_ids else {}
        missing = [cid for cid in unique_ids if cid not in found]
        if missing:
            raise BadRequestError('One or more categories do not exist', code='INVALID_CATEGORY',
                                  details={'category_ids': missing})
        return [found[cid] for cid in unique_ids]


project_service = ProjectService()
