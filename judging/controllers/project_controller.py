# judging/controllers/project_controller.py
from flask import Blueprint, request, jsonify
from judging.middleware.auth_guard import admin_required
from judging.services.project_service import (
    create_project, upsert_project, delete_project, bulk_upsert_projects
)
from judging.services.websocket_service import notify_data_changed

bp_projects = Blueprint('projects', __name__, url_prefix='/api/projects')

@bp_projects.post('')
@admin_required
def post_project():
    project = create_project(request.get_json(silent=True))
    notify_data_changed("projects")
    return jsonify({"ok": True, "project": project.to_dict()}), 201

@bp_projects.post('/bulk')
@admin_required
def post_projects_bulk():
    outcome = bulk_upsert_projects(request.get_json(silent=True))
    notify_data_changed("projects")
    return jsonify(outcome), 200

@bp_projects.put('/<string:project_id>')
@admin_required
def put_project(project_id):
    project = upsert_project(project_id, request.get_json(silent=True))
    notify_data_changed("projects")
    return jsonify({"ok": True, "project": project.to_dict()}), 200

@bp_projects.delete('/<string:project_id>')
@admin_required
def remove_project(project_id):
    delete_project(project_id)
    notify_data_changed("projects")
    return jsonify({"ok": True}), 200
