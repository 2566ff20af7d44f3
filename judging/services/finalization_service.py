# judging/services/finalization_service.py
"""
Per-evaluator lock.

Open (no state row, or finalized_all False) -> Locked (finalized_all True).
Only the evaluator can lock, and only once every assigned project has a
result. Unlocking is an administrative maintenance action.
"""
from flask import current_app

from judging.extension.extensions import db
from judging.exceptions import NotFoundError, ValidationError
from judging.models.evaluator import Evaluator
from judging.models.evaluatorState import EvaluatorState
from judging.models.project import Project
from judging.models.result import Result
from judging.services.panel_service import assigned_project_ids
from judging.services.storage import commit


def get_state(evaluator_id):
    return EvaluatorState.query.filter_by(evaluator_id=evaluator_id).first()


def is_locked(evaluator_id):
    state = get_state(evaluator_id)
    return bool(state and state.finalized_all)


def state_map():
    return {s.evaluator_id: {"finalizedAll": bool(s.finalized_all)} for s in EvaluatorState.query.all()}


def worklist(evaluator_id):
    known = {pid for (pid,) in db.session.query(Project.id)}
    assigned = assigned_project_ids(evaluator_id, known_project_ids=known)
    submitted = {pid for (pid,) in db.session.query(Result.project_id).filter(Result.evaluator_id == evaluator_id)}
    remaining = [pid for pid in assigned if pid not in submitted]
    locked = is_locked(evaluator_id)
    return {
        "evaluatorId": evaluator_id,
        "assignedProjectIds": assigned,
        "submittedProjectIds": [pid for pid in assigned if pid in submitted],
        "remainingProjectIds": remaining,
        "remaining": len(remaining),
        "finalizedAll": locked,
        "canFinalize": (not locked) and bool(assigned) and not remaining,
    }


def finalize(evaluator_id):
    if db.session.get(Evaluator, evaluator_id) is None:
        raise NotFoundError(f"Evaluator {evaluator_id} not found")

    wl = worklist(evaluator_id)
    if wl["finalizedAll"]:
        return wl
    if not wl["assignedProjectIds"]:
        raise ValidationError("No projects are assigned to this evaluator")
    if wl["remaining"]:
        raise ValidationError(f"{wl['remaining']} project(s) still need scores before finalizing")

    state = get_state(evaluator_id)
    if state is None:
        state = EvaluatorState(evaluator_id=evaluator_id)
        db.session.add(state)
    state.finalized_all = True
    commit("Finalizing evaluations")
    current_app.logger.info(f"Evaluator {evaluator_id} finalized {len(wl['assignedProjectIds'])} evaluations")

    wl["finalizedAll"] = True
    wl["canFinalize"] = False
    return wl


def reset_finalization(evaluator_id=None):
    """Locked -> Open for one evaluator, or everyone. Returns how many were unlocked."""
    q = EvaluatorState.query.filter(EvaluatorState.finalized_all.is_(True))
    if evaluator_id:
        q = q.filter(EvaluatorState.evaluator_id == evaluator_id)
    states = q.all()
    for state in states:
        state.finalized_all = False
    commit("Resetting finalization")
    current_app.logger.info(f"Reset finalization for {len(states)} evaluator(s)")
    return len(states)
