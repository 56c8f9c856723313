"""
Alkitu Site - Admin Content Routes
Project and category management
"""
from flask import Blueprint, request

from alkitu.errors import api_success
from alkitu.routes.auth import admin_required
from alkitu.schemas import validate_payload
from alkitu.schemas.projects import (
    CreateCategory, CreateProject, ProjectQuery, UpdateCategory, UpdateProject
)
from alkitu.services.category_service import category_service
from alkitu.services.project_service import project_service
from alkitu.utils import safe_bool

admin_projects_bp = Blueprint('admin_projects', __name__)
admin_categories_bp = Blueprint('admin_categories', __name__)


# ==========================================
# Projects
# ==========================================

@admin_projects_bp.route('', methods=['GET'])
@admin_required
def list_projects(current_admin):
    """
    List projects including inactive ones

    GET /api/admin/projects?page=1&limit=20&category_id=<uuid>&is_active=true
        &search=shop&sort_by=created_at&sort_order=desc
    """
    query = validate_payload(ProjectQuery, request.args.to_dict(), message='Invalid query parameters')
    result = project_service.list_admin(**query.model_dump())
    return api_success(result, 'Projects retrieved successfully')


@admin_projects_bp.route('', methods=['POST'])
@admin_required
def create_project(current_admin):
    data = validate_payload(CreateProject, request.get_json(silent=True))
    project = project_service.create(data.model_dump(mode='json'))
    return api_success({'project': project.to_dict()}, 'Project created successfully', status=201)


@admin_projects_bp.route('/<project_id>', methods=['GET'])
@admin_required
def get_project(current_admin, project_id):
    project = project_service.get(project_id)
    return api_success({'project': project.to_dict()}, 'Project retrieved successfully')


@admin_projects_bp.route('/<project_id>', methods=['PATCH'])
@admin_required
def update_project(current_admin, project_id):
    """Only fields present in the body change; category_ids replaces every association"""
    data = validate_payload(UpdateProject, request.get_json(silent=True))
    project = project_service.update(project_id, data.model_dump(mode='json', exclude_unset=True))
    return api_success({'project': project.to_dict()}, 'Project updated successfully')


@admin_projects_bp.route('/<project_id>', methods=['DELETE'])
@admin_required
def delete_project(current_admin, project_id):
    deleted = project_service.delete(project_id)
    return api_success(deleted, 'Project deleted successfully')


# ==========================================
# Categories
# ==========================================

@admin_categories_bp.route('', methods=['GET'])
@admin_required
def list_categories(current_admin):
    include_count = safe_bool(request.args.get('include_count'), default=True)
    categories = category_service.list_categories(include_count=include_count)
    return api_success({'categories': categories}, 'Categories retrieved successfully')


@admin_categories_bp.route('', methods=['POST'])
@admin_required
def create_category(current_admin):
    data = validate_payload(CreateCategory, request.get_json(silent=True))
    category = category_service.create(data.model_dump())
    return api_success({'category': category.to_dict()}, 'Category created successfully', status=201)


@admin_categories_bp.route('/<category_id>', methods=['GET'])
@admin_required
def get_category(current_admin, category_id):
    category = category_service.get(category_id)
    return api_success({'category': category.to_dict(include_count=True)}, 'Category retrieved successfully')


@admin_categories_bp.route('/<category_id>', methods=['PATCH'])
@admin_required
def update_category(current_admin, category_id):
    data = validate_payload(UpdateCategory, request.get_json(silent=True))
    category = category_service.update(category_id, data.model_dump(exclude_unset=True))
    return api_success({'category': category.to_dict()}, 'Category updated successfully')


@admin_categories_bp.route('/<category_id>', methods=['DELETE'])
@admin_required
def delete_category(current_admin, category_id):
    deleted = category_service.delete(category_id)
    return api_success(deleted, 'Category deleted successfully')
