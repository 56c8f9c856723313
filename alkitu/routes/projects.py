"""
Alkitu Site - Public Content Routes
Active projects, categories and public team profiles
"""
from flask import Blueprint, request

from alkitu.errors import api_success
from alkitu.schemas import validate_payload
from alkitu.schemas.projects import PublicProjectQuery
from alkitu.services.category_service import category_service
from alkitu.services.profile_service import profile_service
from alkitu.services.project_service import project_service

projects_bp = Blueprint('projects', __name__)
categories_bp = Blueprint('categories', __name__)
profiles_bp = Blueprint('profiles', __name__)


# ==========================================
# Projects
# ==========================================

@projects_bp.route('', methods=['GET'])
def list_projects():
    """
    List active projects

    GET /api/projects?page=1&limit=20&category_slug=web-design&search=shop
    """
    query = validate_payload(PublicProjectQuery, request.args.to_dict(), message='Invalid query parameters')
    result = project_service.list_public(
        page=query.page,
        limit=query.limit,
        category_slug=query.category_slug,
        search=query.search
    )
    return api_success(result, 'Projects retrieved successfully')


@projects_bp.route('/<slug>', methods=['GET'])
def get_project(slug):
    project = project_service.get_public(slug)
    return api_success({'project': project.to_dict()}, 'Project retrieved successfully')


# ==========================================
# Categories
# ==========================================

@categories_bp.route('', methods=['GET'])
def list_categories():
    categories = category_service.list_categories(include_count=False)
    return api_success({'categories': categories}, 'Categories retrieved successfully')


# ==========================================
# Profiles
# ==========================================

@profiles_bp.route('/<username>', methods=['GET'])
def get_public_profile(username):
    """Public view: only fields and list items flagged public"""
    profile = profile_service.get_public(username)
    return api_success(
        {'profile': profile},
        'Public profile retrieved successfully',
        headers={'Cache-Control': 'public, s-maxage=300, stale-while-revalidate=600'}
    )
