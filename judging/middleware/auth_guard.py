from functools import wraps
from flask import current_app, request
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from judging.exceptions import PermissionDenied
from judging.services.auth_service import ROLE_ADMIN, ROLE_EVALUATOR


def _require_role(role):
    verify_jwt_in_request()
    claims = get_jwt()
    if claims.get("role") != role:
        current_app.logger.warning(
            f"{request.method} {request.path} rejected: role {claims.get('role')!r}, needs {role!r}"
        )
        raise PermissionDenied("Unauthorized")
    return claims


def admin_required(f):
    """
    Protect admin routes.

    Usage:
        @bp.put('/settings')
        @admin_required
        def put_settings():
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        _require_role(ROLE_ADMIN)
        return f(*args, **kwargs)

    return decorated_function


def evaluator_required(f):
    """Protect evaluator routes; the handler reads its id via current_evaluator_id()."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        _require_role(ROLE_EVALUATOR)
        return f(*args, **kwargs)

    return decorated_function


def current_evaluator_id():
    return get_jwt_identity()


def ensure_self(target_evaluator_id, message="Unauthorized"):
    """Evaluators may only act on their own records."""
    me = current_evaluator_id()
    if target_evaluator_id != me:
        current_app.logger.warning(f"Evaluator {me} attempted to act for {target_evaluator_id}")
        raise PermissionDenied(message)
    return me


def is_admin_request():
    """Soft check for routes that are public but show more to admins."""
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError):
        return False
    return (get_jwt() or {}).get("role") == ROLE_ADMIN
