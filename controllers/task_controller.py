# controllers/task_controller.py
from flask import Blueprint, request

from controllers.auth_helpers import auth_required
from services.task_service import TaskService
from utils.partial_update import TaskUpdate
from utils.permissions import get_current_user
from utils.response import json_response

task_bp = Blueprint("task", __name__, url_prefix="/api/tasks")


@task_bp.get("")
@auth_required()
def list_tasks():
    """
    查询参数：projectId / status / priority / assigneeId，均为精确匹配
    """
    args = request.args
    filters = {
        "project_id": args.get("projectId", type=int),
        "status": args.get("status") or None,
        "priority": args.get("priority") or None,
        "assignee_id": args.get("assigneeId", type=int),
    }
    tasks = TaskService.list(get_current_user().id, filters)
    return json_response(data=[t.to_dict(detail=True) for t in tasks])


@task_bp.post("")
@auth_required()
def create_task():
    data = request.get_json(silent=True) or {}
    task = TaskService.create(
        get_current_user().id,
        title=data.get("title"),
        project_id=data.get("projectId"),
        description=data.get("description"),
        status=data.get("status"),
        priority=data.get("priority"),
        assignee_id=data.get("assigneeId"),
        due_date=data.get("dueDate"),
        estimated_hours=data.get("estimatedHours"),
        tags=data.get("tags"),
    )
    return json_response(message="Task created successfully", data=task.to_dict(detail=True), code=201)


@task_bp.get("/<int:task_id>")
@auth_required()
def get_task(task_id: int):
    task = TaskService.get(get_current_user().id, task_id)
    return json_response(data=task.to_dict(detail=True))


@task_bp.put("/<int:task_id>")
@auth_required()
def update_task(task_id: int):
    data = request.get_json(silent=True) or {}
    task = TaskService.update(get_current_user().id, task_id, TaskUpdate.from_payload(data))
    return json_response(message="Task updated successfully", data=task.to_dict(detail=True))


@task_bp.delete("/<int:task_id>")
@auth_required()
def delete_task(task_id: int):
    TaskService.delete(get_current_user().id, task_id)
    return json_response(message="Task deleted successfully")
