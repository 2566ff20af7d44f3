# judging/services/evaluator_service.py
from judging.extension.extensions import db
from judging.exceptions import NotFoundError, PermissionDenied, ValidationError
from judging.models.evaluator import Evaluator
from judging.models.evaluatorState import EvaluatorState
from judging.services.payload_formatters import clean_str, new_access_code, new_id
from judging.services.storage import bulk_upsert, commit

EVALUATOR_FIELDS = ("name", "email", "expertise", "notes", "code")
PROFILE_FIELDS = ("name", "expertise", "notes")


def list_evaluators():
    return Evaluator.query.order_by(Evaluator.created_at.asc(), Evaluator.id.asc()).all()


def _clean(payload, creating):
    if not isinstance(payload, dict):
        raise ValidationError("Evaluator must be an object")
    fields = {k: clean_str(payload[k]) or "" for k in EVALUATOR_FIELDS if k in payload}
    if "email" in fields:
        fields["email"] = fields["email"].lower()
    if (creating or "email" in fields) and not fields.get("email"):
        raise ValidationError("email is required")
    if "code" in fields and not fields["code"]:
        if not creating:
            raise ValidationError("code cannot be empty")
        del fields["code"]
    if creating and "code" not in fields:
        fields["code"] = new_access_code()
    return fields


def create_evaluator(payload):
    fields = _clean(payload, creating=True)
    evaluator_id = clean_str(payload.get("id")) or new_id("EVAL")
    if db.session.get(Evaluator, evaluator_id) is not None:
        raise ValidationError(f"Evaluator {evaluator_id} already exists")
    evaluator = Evaluator(id=evaluator_id, **fields)
    db.session.add(evaluator)
    commit("Creating evaluator")
    return evaluator


def _upsert(evaluator_id, payload):
    evaluator = db.session.get(Evaluator, evaluator_id)
    fields = _clean(payload, creating=evaluator is None)
    if evaluator is None:
        evaluator = Evaluator(id=evaluator_id)
        db.session.add(evaluator)
    for k, v in fields.items():
        setattr(evaluator, k, v)
    return evaluator


def upsert_evaluator(evaluator_id, payload):
    evaluator = _upsert(evaluator_id, payload)
    commit("Saving evaluator")
    return evaluator


def bulk_upsert_evaluators(records):
    def apply(record):
        if not isinstance(record, dict):
            raise ValidationError("Evaluator must be an object")
        evaluator_id = clean_str(record.get("id"))
        if not evaluator_id:
            raise ValidationError("id is required")
        _upsert(evaluator_id, record)
        db.session.flush()

    return bulk_upsert(records, apply, "evaluator")


def delete_evaluator(evaluator_id):
    # results and panel membership keep the dangling id; readers show "Unknown"
    evaluator = db.session.get(Evaluator, evaluator_id)
    if evaluator is None:
        raise NotFoundError(f"Evaluator {evaluator_id} not found")
    EvaluatorState.query.filter_by(evaluator_id=evaluator_id).delete()
    db.session.delete(evaluator)
    commit("Deleting evaluator")


def update_profile(evaluator_id, payload):
    """Self-service edit of name, expertise and notes only."""
    if not isinstance(payload, dict):
        raise ValidationError("evaluator must be an object")
    target = clean_str(payload.get("id")) or evaluator_id
    if target != evaluator_id:
        raise PermissionDenied("Unauthorized")

    evaluator = db.session.get(Evaluator, evaluator_id)
    if evaluator is None:
        raise NotFoundError(f"Evaluator {evaluator_id} not found")

    fields = {k: clean_str(payload[k]) or "" for k in PROFILE_FIELDS if k in payload}
    if not fields.get("name", evaluator.name):
        raise ValidationError("Name required")
    for k, v in fields.items():
        setattr(evaluator, k, v)
    commit("Saving profile")
    return evaluator
