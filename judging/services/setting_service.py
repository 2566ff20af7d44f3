# judging/services/setting_service.py
import math

from flask import current_app
from werkzeug.security import generate_password_hash

from judging.extension.extensions import db
from judging.exceptions import ValidationError
from judging.models.setting import Setting, SUBSCRIPTION_PLANS
from judging.services.payload_formatters import clean_str, format_points
from judging.services.storage import commit

DEFAULT_MAX_POINTS = 10

# wire name -> column
_TEXT_FIELDS = {
    "eventTitle": "event_title",
    "subtitle": "subtitle",
    "welcomeTitle": "welcome_title",
    "welcomeBody": "welcome_body",
    "logoUrl": "logo_url",
}


def get_settings():
    """Singleton settings row, created with defaults on first access."""
    settings = Setting.query.order_by(Setting.id.asc()).first()
    if settings is None:
        settings = Setting(
            admin_email=current_app.config["DEFAULT_ADMIN_EMAIL"].strip().lower(),
            admin_password_hash=generate_password_hash(current_app.config["DEFAULT_ADMIN_PASSWORD"]),
        )
        db.session.add(settings)
        commit("Creating default settings")
        current_app.logger.info("Created default settings row")
    return settings


def _max_points(raw, position):
    if raw is None or raw == "":
        return DEFAULT_MAX_POINTS
    if isinstance(raw, bool):
        raise ValidationError(f"Rubric item {position}: maxPoints must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Rubric item {position}: maxPoints must be a number")
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"Rubric item {position}: maxPoints must be positive")
    return format_points(value)


def normalize_rubric(items):
    if not isinstance(items, list):
        raise ValidationError("rubric must be a list")

    seen = set()
    rubric = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValidationError(f"Rubric item {position} must be an object")
        key = clean_str(item.get("key"))
        if not key:
            raise ValidationError(f"Rubric item {position} is missing a key")
        if key in seen:
            raise ValidationError(f"Duplicate rubric key '{key}'")
        seen.add(key)
        rubric.append({
            "key": key,
            "label": clean_str(item.get("label")) or key,
            "description": clean_str(item.get("description")) or "",
            "maxPoints": _max_points(item.get("maxPoints"), position),
        })
    return rubric


def get_rubric(settings=None):
    settings = settings or get_settings()
    rubric = []
    for item in settings.rubric or []:
        entry = dict(item)
        entry["maxPoints"] = entry.get("maxPoints") or DEFAULT_MAX_POINTS
        entry.setdefault("label", entry.get("key"))
        entry.setdefault("description", "")
        rubric.append(entry)
    return rubric


def _carousel(slides):
    if not isinstance(slides, list):
        raise ValidationError("carouselSlides must be a list")
    out = []
    for slide in slides:
        if not isinstance(slide, dict):
            raise ValidationError("carousel slides must be objects")
        out.append({
            "imageUrl": clean_str(slide.get("imageUrl")) or "",
            "title": clean_str(slide.get("title")) or "",
            "description": clean_str(slide.get("description")) or "",
        })
    return out


def _subscription(current, patch):
    if not isinstance(patch, dict):
        raise ValidationError("subscription must be an object")
    merged = dict(current or {})
    for k in ("plan", "paymentId", "orderId", "paidAt"):
        if k in patch:
            merged[k] = patch[k]
    if merged.get("plan", "free") not in SUBSCRIPTION_PLANS:
        raise ValidationError(f"subscription.plan must be one of {', '.join(SUBSCRIPTION_PLANS)}")
    return merged


def update_settings(payload):
    if not isinstance(payload, dict):
        raise ValidationError("Settings body must be an object")

    settings = get_settings()
    for wire, column in _TEXT_FIELDS.items():
        if wire in payload:
            setattr(settings, column, clean_str(payload[wire]) or "")

    if "adminEmail" in payload:
        email = clean_str(payload["adminEmail"])
        if not email:
            raise ValidationError("adminEmail cannot be empty")
        settings.admin_email = email.lower()

    # "adminPass" is what older clients send
    password = payload.get("adminPassword", payload.get("adminPass"))
    if password:
        settings.admin_password_hash = generate_password_hash(str(password))

    if "rubric" in payload:
        settings.rubric = normalize_rubric(payload["rubric"])
    if "carouselSlides" in payload:
        settings.carousel_slides = _carousel(payload["carouselSlides"])
    if "subscription" in payload:
        settings.subscription = _subscription(settings.subscription, payload["subscription"])

    commit("Saving settings")
    return settings
