# judging/services/result_service.py
import math
from datetime import datetime, timezone

from flask import current_app

from judging.extension.extensions import db
from judging.exceptions import FinalizationLocked, NotFoundError, PermissionDenied, ValidationError
from judging.models.evaluator import Evaluator
from judging.models.evaluatorState import EvaluatorState
from judging.models.project import Project
from judging.models.result import Result
from judging.services.finalization_service import is_locked
from judging.services.panel_service import assigned_project_ids, list_panels, panel_for
from judging.services.payload_formatters import clean_str, format_points, new_id
from judging.services.setting_service import get_rubric
from judging.services.storage import commit


def list_results():
    return Result.query.order_by(Result.created_at.asc(), Result.id.asc()).all()


def results_for_evaluator(evaluator_id):
    return (Result.query
            .filter_by(evaluator_id=evaluator_id)
            .order_by(Result.created_at.asc(), Result.id.asc())
            .all())


def validate_scores(raw, rubric):
    """Every rubric key needs a number in [0, maxPoints]; returns (scores, total)."""
    if not isinstance(raw, dict):
        raise ValidationError("scores must be an object keyed by rubric item")
    if not rubric:
        raise ValidationError("No rubric is configured")

    keys = {item["key"] for item in rubric}
    unknown = [k for k in raw if k not in keys]
    if unknown:
        raise ValidationError(f"Unknown rubric keys: {', '.join(sorted(unknown))}")

    scores, total = {}, 0
    for item in rubric:
        value = raw.get(item["key"])
        label, max_points = item["label"], item["maxPoints"]
        if value is None or value == "" or isinstance(value, bool):
            raise ValidationError(f"Score for '{label}' is required")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Score for '{label}' must be a number")
        if not math.isfinite(number) or number < 0 or number > float(max_points):
            raise ValidationError(f"Score for '{label}' must be between 0 and {max_points}")
        scores[item["key"]] = format_points(number)
        total += number
    return scores, format_points(total)


def submit_result(evaluator_id, payload):
    """
    Create or update the evaluator's result for one project.

    At most one result exists per (project, evaluator): a resubmission
    updates the existing row and keeps its id.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Result body must be an object")

    target = clean_str(payload.get("evaluatorId")) or evaluator_id
    if target != evaluator_id:
        raise PermissionDenied("Cannot save for another evaluator")
    # tokens outlive deleted evaluators
    if db.session.get(Evaluator, evaluator_id) is None:
        raise NotFoundError(f"Evaluator {evaluator_id} not found")
    if is_locked(evaluator_id):
        raise FinalizationLocked(evaluator_id)

    project_id = clean_str(payload.get("projectId"))
    if not project_id:
        raise ValidationError("projectId is required")
    if db.session.get(Project, project_id) is None:
        raise NotFoundError(f"Project {project_id} not found")

    panels = list_panels()
    if project_id not in assigned_project_ids(evaluator_id, panels=panels):
        raise PermissionDenied(f"Project {project_id} is not assigned to this evaluator")

    scores, total = validate_scores(payload.get("scores"), get_rubric())

    result = Result.query.filter_by(project_id=project_id, evaluator_id=evaluator_id).first()
    created = result is None
    if created:
        result_id = clean_str(payload.get("id")) or new_id("RES")
        if db.session.get(Result, result_id) is not None:
            # id belongs to another (project, evaluator) pair
            result_id = new_id("RES")
        result = Result(id=result_id, project_id=project_id, evaluator_id=evaluator_id)
        db.session.add(result)

    panel = panel_for(project_id, evaluator_id, panels=panels)
    result.panel_id = panel.id if panel else clean_str(payload.get("panelId"))
    result.scores = scores
    result.total = total
    result.remark = clean_str(payload.get("remark")) or ""
    result.ts = datetime.now(timezone.utc)
    commit("Saving result")

    current_app.logger.info(
        f"{'Created' if created else 'Updated'} result {result.id} "
        f"(project {project_id}, evaluator {evaluator_id}, total {total})"
    )
    return result, created


def clear_results():
    """Admin wipe: every result and every finalization state."""
    removed = db.session.query(Result).delete()
    db.session.query(EvaluatorState).delete()
    commit("Clearing results")
    current_app.logger.warning(f"Cleared {removed} results and all finalization state")
    return removed
