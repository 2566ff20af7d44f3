# judging/services/panel_service.py
"""
Panel assignment resolver.

A panel binds a set of evaluators to a set of projects. An evaluator's
worklist is the union of project ids over every panel they sit on; panels
are expected to be disjoint, but that is only checked when a panel is
saved (warn or block, per PANEL_CONFLICT_POLICY), so readers never assume
exclusivity.
"""
from flask import current_app

from judging.extension.extensions import db
from judging.exceptions import NotFoundError, ValidationError
from judging.models.evaluator import Evaluator
from judging.models.panel import Panel
from judging.models.project import Project
from judging.services.payload_formatters import clean_str, new_id
from judging.services.storage import commit

POLICY_WARN = "warn"
POLICY_BLOCK = "block"


def list_panels():
    return Panel.query.order_by(Panel.created_at.asc(), Panel.id.asc()).all()


def _unique_ids(values, label):
    if values is None:
        return []
    if not isinstance(values, (list, tuple, set)):
        raise ValidationError(f"{label} must be a list")
    ids = []
    for v in values:
        s = clean_str(v)
        if s and s not in ids:
            ids.append(s)
    return ids


def assigned_project_ids(evaluator_id, panels=None, known_project_ids=None):
    """
    Union of project ids over all panels containing the evaluator, first-seen
    order, no duplicates. Pass known_project_ids to drop ids of deleted projects.
    """
    if panels is None:
        panels = list_panels()
    assigned = []
    for panel in panels:
        if evaluator_id not in (panel.evaluator_ids or []):
            continue
        for pid in panel.project_ids or []:
            if pid in assigned:
                continue
            if known_project_ids is not None and pid not in known_project_ids:
                continue
            assigned.append(pid)
    return assigned


def panel_for(project_id, evaluator_id, panels=None):
    if panels is None:
        panels = list_panels()
    for panel in panels:
        if evaluator_id in (panel.evaluator_ids or []) and project_id in (panel.project_ids or []):
            return panel
    return None


def claimed_elsewhere(panel_id=None, panels=None):
    """Ids already used by panels other than panel_id: {"evaluatorIds": {id: panelId}, "projectIds": {...}}."""
    if panels is None:
        panels = list_panels()
    evaluators, projects = {}, {}
    for panel in panels:
        if panel.id == panel_id:
            continue
        for eid in panel.evaluator_ids or []:
            evaluators.setdefault(eid, panel.id)
        for pid in panel.project_ids or []:
            projects.setdefault(pid, panel.id)
    return {"evaluatorIds": evaluators, "projectIds": projects}


def validate_panel(payload, panel_id=None):
    """
    Returns (clean_fields, warnings). Raises ValidationError for a missing name,
    too few members, unknown ids, or (under the block policy) conflicts.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Panel body must be an object")

    name = clean_str(payload.get("name"))
    if not name:
        raise ValidationError("Name required")

    evaluator_ids = _unique_ids(payload.get("evaluatorIds"), "evaluatorIds")
    project_ids = _unique_ids(payload.get("projectIds"), "projectIds")

    min_evals = current_app.config.get("PANEL_MIN_EVALUATORS", 3)
    min_projects = current_app.config.get("PANEL_MIN_PROJECTS", 2)
    if len(evaluator_ids) < min_evals:
        raise ValidationError(f"Please select at least {min_evals} evaluators.")
    if len(project_ids) < min_projects:
        raise ValidationError(f"Please select at least {min_projects} projects.")

    # ids already stored on this panel stay valid after their record is deleted
    current = db.session.get(Panel, panel_id) if panel_id else None
    known_evals = {eid for (eid,) in db.session.query(Evaluator.id).filter(Evaluator.id.in_(evaluator_ids))}
    if current is not None:
        known_evals.update(current.evaluator_ids or [])
    missing = [eid for eid in evaluator_ids if eid not in known_evals]
    if missing:
        raise ValidationError(f"Unknown evaluator ids: {', '.join(missing)}")
    known_projects = {pid for (pid,) in db.session.query(Project.id).filter(Project.id.in_(project_ids))}
    if current is not None:
        known_projects.update(current.project_ids or [])
    missing = [pid for pid in project_ids if pid not in known_projects]
    if missing:
        raise ValidationError(f"Unknown project ids: {', '.join(missing)}")

    claimed = claimed_elsewhere(panel_id)
    warnings = []
    for eid in evaluator_ids:
        if eid in claimed["evaluatorIds"]:
            warnings.append({"type": "evaluator", "id": eid, "panelId": claimed["evaluatorIds"][eid]})
    for pid in project_ids:
        if pid in claimed["projectIds"]:
            warnings.append({"type": "project", "id": pid, "panelId": claimed["projectIds"][pid]})

    if warnings and current_app.config.get("PANEL_CONFLICT_POLICY", POLICY_WARN) == POLICY_BLOCK:
        taken = ", ".join(f"{w['type']} {w['id']} (in {w['panelId']})" for w in warnings)
        raise ValidationError(f"Already assigned to another panel: {taken}")
    if warnings:
        current_app.logger.warning(f"Panel {panel_id or name} overlaps other panels: {warnings}")

    return {"name": name, "evaluator_ids": evaluator_ids, "project_ids": project_ids}, warnings


def create_panel(payload):
    fields, warnings = validate_panel(payload)
    panel_id = clean_str(payload.get("id")) or new_id("PNL")
    if db.session.get(Panel, panel_id) is not None:
        raise ValidationError(f"Panel {panel_id} already exists")
    panel = Panel(id=panel_id, **fields)
    db.session.add(panel)
    commit("Creating panel")
    return panel, warnings


def upsert_panel(panel_id, payload):
    """PUT semantics: update in place, or create under panel_id when absent."""
    fields, warnings = validate_panel(payload, panel_id=panel_id)
    panel = db.session.get(Panel, panel_id)
    if panel is None:
        panel = Panel(id=panel_id)
        db.session.add(panel)
    panel.name = fields["name"]
    panel.evaluator_ids = fields["evaluator_ids"]
    panel.project_ids = fields["project_ids"]
    commit("Saving panel")
    return panel, warnings


def delete_panel(panel_id):
    panel = db.session.get(Panel, panel_id)
    if panel is None:
        raise NotFoundError(f"Panel {panel_id} not found")
    db.session.delete(panel)
    commit("Deleting panel")
