# judging/services/maintenance_service.py
from flask import current_app

from judging.extension.extensions import db
from judging.models.evaluator import Evaluator
from judging.models.evaluatorState import EvaluatorState
from judging.models.panel import Panel
from judging.models.project import Project
from judging.models.result import Result
from judging.services.storage import commit


def reset_all():
    """Wipe every admin-managed record except the settings row."""
    counts = {}
    for label, model in (("evaluators", Evaluator), ("projects", Project), ("panels", Panel),
                         ("results", Result), ("evaluatorStates", EvaluatorState)):
        counts[label] = db.session.query(model).delete()
    commit("Resetting all data")
    current_app.logger.warning(f"Full data reset: {counts}")
    return counts
