# judging/services/storage.py
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from judging.extension.extensions import db
from judging.exceptions import JudgingError, StorageError, ValidationError


def commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("%s failed", action)
        raise StorageError(f"{action} failed: {e.__class__.__name__}") from e


def bulk_upsert(records, apply_record, label):
    """
    Apply each record in its own savepoint so one bad row does not abort the rest.
    Returns {"ok", "imported", "failed"[, "warning"]}.
    """
    if not isinstance(records, list):
        raise ValidationError("Request body must be an array")

    imported = 0
    failed = []
    for index, record in enumerate(records):
        record_id = record.get("id") if isinstance(record, dict) else None
        try:
            with db.session.begin_nested():
                apply_record(record)
            imported += 1
        except (JudgingError, SQLAlchemyError) as e:
            failed.append({
                "index": index,
                "id": record_id,
                "error": getattr(e, "message", None) or e.__class__.__name__,
            })

    commit(f"Bulk {label} import")

    payload = {"ok": True, "imported": imported, "failed": failed}
    if failed:
        current_app.logger.warning("Bulk %s import partial errors: %d of %d rejected",
                                   label, len(failed), len(records))
        payload["warning"] = "Some records failed to import (likely validation/duplicates)"
    return payload
