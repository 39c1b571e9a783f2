from __future__ import annotations

from utils.dto import RolloverPreviewItem
from utils.token_utils import generate_preview_token, verify_preview_token

ITEMS = [
    RolloverPreviewItem(
        class_id=1,
        class_name="Primary 1 (A)",
        next_grade="Primary 2",
        promote_ids=frozenset({3, 1}),
        repeat_ids=frozenset({2}),
        target_class_id=None,
    ),
    RolloverPreviewItem(class_id=4, class_name="SHS 3 (A)", next_grade=None,
                        graduate_ids=frozenset({9})),
]


def test_token_round_trip(app):
    with app.test_request_context():
        token = generate_preview_token(1, ITEMS, 50)
        assert verify_preview_token(token, 1) == ITEMS


def test_token_for_another_school_is_rejected(app):
    with app.test_request_context():
        token = generate_preview_token(1, ITEMS, 50)
        assert verify_preview_token(token, 2) is None


def test_tampered_token_is_rejected(app):
    with app.test_request_context():
        token = generate_preview_token(1, ITEMS, 50)
        assert verify_preview_token(token[:-2] + "xx", 1) is None


def test_expired_token_is_rejected(app):
    with app.test_request_context():
        token = generate_preview_token(1, ITEMS, 50)
        assert verify_preview_token(token, 1, max_age=-1) is None
