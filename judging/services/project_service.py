# judging/services/project_service.py
from judging.extension.extensions import db
from judging.exceptions import NotFoundError, ValidationError
from judging.models.project import Project
from judging.services.payload_formatters import clean_str, new_id
from judging.services.storage import bulk_upsert, commit

PROJECT_FIELDS = ("title", "category", "team", "school", "contact")


def list_projects():
    return Project.query.order_by(Project.created_at.asc(), Project.id.asc()).all()


def _clean(payload, require_title):
    if not isinstance(payload, dict):
        raise ValidationError("Project must be an object")
    fields = {k: clean_str(payload[k]) or "" for k in PROJECT_FIELDS if k in payload}
    if (require_title or "title" in fields) and not fields.get("title"):
        raise ValidationError("title is required")
    return fields


def create_project(payload):
    fields = _clean(payload, require_title=True)
    project_id = clean_str(payload.get("id")) or new_id("PRJ")
    if db.session.get(Project, project_id) is not None:
        raise ValidationError(f"Project {project_id} already exists")
    project = Project(id=project_id, **fields)
    db.session.add(project)
    commit("Creating project")
    return project


def _upsert(project_id, payload):
    project = db.session.get(Project, project_id)
    fields = _clean(payload, require_title=project is None)
    if project is None:
        project = Project(id=project_id)
        db.session.add(project)
    for k, v in fields.items():
        setattr(project, k, v)
    return project


def upsert_project(project_id, payload):
    """PUT semantics: update fields present in the body, or create under project_id."""
    project = _upsert(project_id, payload)
    commit("Saving project")
    return project


def bulk_upsert_projects(records):
    def apply(record):
        if not isinstance(record, dict):
            raise ValidationError("Project must be an object")
        project_id = clean_str(record.get("id"))
        if not project_id:
            raise ValidationError("id is required")
        _upsert(project_id, record)
        db.session.flush()

    return bulk_upsert(records, apply, "project")


def delete_project(project_id):
    project = db.session.get(Project, project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found")
    db.session.delete(project)
    commit("Deleting project")
