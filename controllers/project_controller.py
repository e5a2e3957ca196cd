from flask import Blueprint, request
from utils.response import json_response
from utils.partial_update import ProjectUpdate
from services.project_service import ProjectService
from controllers.auth_helpers import auth_required
from utils.permissions import get_current_user


project_bp = Blueprint("project", __name__, url_prefix="/api/projects")


@project_bp.post("")
@auth_required()
def create_project():
    user = get_current_user()
    data = request.get_json(silent=True) or {}
    project = ProjectService.create(
        user.id,
        name=data.get("name"),
        description=data.get("description"),
        status=data.get("status"),
        start_date=data.get("startDate"),
        end_date=data.get("endDate"),
    )
    return json_response(message="Project created successfully", data=project.to_dict(), code=201)


@project_bp.get("")
@auth_required()
def list_projects():
    projects = ProjectService.list(get_current_user().id)
    return json_response(data=[p.to_dict() for p in projects])


@project_bp.get("/<int:project_id>")
@auth_required()
def get_project(project_id: int):
    project = ProjectService.get(get_current_user().id, project_id)
    return json_response(data=project.to_dict())


@project_bp.put("/<int:project_id>")
@auth_required()
def update_project(project_id: int):
    data = request.get_json(silent=True) or {}
    project = ProjectService.update(get_current_user().id, project_id, ProjectUpdate.from_payload(data))
    return json_response(message="Project updated successfully", data=project.to_dict())


@project_bp.delete("/<int:project_id>")
@auth_required()
def delete_project(project_id: int):
    ProjectService.delete(get_current_user().id, project_id)
    return json_response(message="Project deleted successfully")


@project_bp.get("/<int:project_id>/members")
@auth_required()
def list_members(project_id: int):
    members = ProjectService.list_members(get_current_user().id, project_id)
    return json_response(data=[m.to_dict() for m in members])


@project_bp.post("/<int:project_id>/members")
@auth_required()
def add_member(project_id: int):
    data = request.get_json(silent=True) or {}
    member = ProjectService.add_member(
        get_current_user().id,
        project_id,
        data.get("userId"),
        role=data.get("role"),
    )
    return json_response(message="Member added successfully", data=member.to_dict(), code=201)
