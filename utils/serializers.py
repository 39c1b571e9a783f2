from utils.dto import RolloverPreviewItem


def _ids(values):
    return sorted(values, key=lambda v: (str(type(v)), v))


def serialize_class(c):
    return {
        'id': c.class_id,
        'name': c.name,
        'grade_level': c.grade_level,
        'section': c.section,
        'capacity': c.capacity,
        'homeroom_teacher_id': c.homeroom_teacher_id,
        'subjects': list(c.subjects),
    }


def serialize_preview_item(item):
    return {
        'class_id': item.class_id,
        'class_name': item.class_name,
        'next_grade': item.next_grade,
        'promote_ids': _ids(item.promote_ids),
        'repeat_ids': _ids(item.repeat_ids),
        'graduate_ids': _ids(item.graduate_ids),
        'target_class_id': item.target_class_id,
    }


def deserialize_preview_item(data):
    return RolloverPreviewItem(
        class_id=data['class_id'],
        class_name=data.get('class_name', ''),
        next_grade=data.get('next_grade'),
        promote_ids=frozenset(data.get('promote_ids') or ()),
        repeat_ids=frozenset(data.get('repeat_ids') or ()),
        graduate_ids=frozenset(data.get('graduate_ids') or ()),
        target_class_id=data.get('target_class_id'),
    )


def serialize_commit_result(result):
    return {
        'success': result.ok,
        'succeeded': list(result.succeeded),
        'failed_at': result.failed_at,
        'error': result.error,
    }
