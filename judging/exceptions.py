# judging/exceptions.py
"""
Error taxonomy shared by services and controllers.

Services raise these; the handlers registered in ``create_app`` turn them
into ``{"ok": false, "error": ...}`` JSON bodies with the matching status.
"""


class JudgingError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"ok": False, "error": self.message}


class AuthError(JudgingError):
    status_code = 401


class PermissionDenied(JudgingError):
    status_code = 403


class FinalizationLocked(PermissionDenied):
    """Evaluator already finalized; scores are read-only."""

    def __init__(self, evaluator_id):
        super().__init__(f"Evaluations for {evaluator_id} are finalized and can no longer be edited")
        self.evaluator_id = evaluator_id


class ValidationError(JudgingError):
    status_code = 400


class NotFoundError(JudgingError):
    status_code = 404


class StorageError(JudgingError):
    status_code = 500
