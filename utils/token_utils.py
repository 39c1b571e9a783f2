from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from flask import current_app

from utils.serializers import deserialize_preview_item, serialize_preview_item

PREVIEW_SALT = "rollover-preview"


def _serializer():
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=PREVIEW_SALT)


def generate_preview_token(school_id, items, threshold):
    payload = {
        "school_id": school_id,
        "threshold": threshold,
        "items": [serialize_preview_item(i) for i in items],
    }
    return _serializer().dumps(payload)


def verify_preview_token(token, school_id, max_age=None):
    """Return the preview items signed into `token`, or None if it is invalid or expired."""
    if max_age is None:
        max_age = current_app.config.get("ROLLOVER_TOKEN_MAX_AGE", 1800)
    try:
        payload = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        current_app.logger.info("Rollover preview token expired")
        return None
    except BadSignature:
        current_app.logger.warning("Rejected rollover preview token with a bad signature")
        return None
    if payload.get("school_id") != school_id:
        return None
    return [deserialize_preview_item(i) for i in payload.get("items", [])]
