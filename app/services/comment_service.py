"""
Comment Service — discussion threads on ideas, feedback and initiatives.

Comments hang off their parent by (entity_type, entity_id). The parent must
exist in the caller's tenant; a foreign parent is reported as missing.
Only the author or a tenant admin may edit or delete a comment.
"""

import logging

from app.core.exceptions import ValidationError, forbidden
from app.models import db
from app.models.comment import COMMENT_ENTITY_TYPES, Comment
from app.models.product import Feedback, Idea, Initiative
from app.services.entity_service import is_blank
from app.services.helpers.scoped_queries import get_scoped
from app.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)

_PARENT_MODELS = {
    "idea": Idea,
    "feedback": Feedback,
    "initiative": Initiative,
}


def _check_parent(tenant_id: int, entity_type: str, entity_id: int):
    if entity_type not in COMMENT_ENTITY_TYPES:
        raise ValidationError(
            f"Invalid entity_type. Must be one of: {', '.join(COMMENT_ENTITY_TYPES)}",
            details={"entity_type": "invalid"},
        )
    return get_scoped(_PARENT_MODELS[entity_type], entity_id, tenant_id=tenant_id)


def _clean_content(content) -> str:
    if content is not None and not isinstance(content, str):
        raise ValidationError("Content must be a string", details={"content": "must be a string"})
    if is_blank(content):
        raise ValidationError("Content is required", details={"content": "required"})
    return content.strip()


def _can_modify(comment: Comment, user) -> bool:
    return comment.user_id == user.id or user.is_admin


def _query(tenant_id: int, entity_type: str, entity_id: int):
    return Comment.query.filter_by(
        tenant_id=tenant_id, entity_type=entity_type, entity_id=entity_id,
    )


# ── Read ─────────────────────────────────────────────────────────────────

def list_comments(tenant_id: int, entity_type: str, entity_id: int) -> list[dict]:
    """Comments on one entity, oldest first."""
    _check_parent(tenant_id, entity_type, entity_id)
    rows = _query(tenant_id, entity_type, entity_id).order_by(
        Comment.created_at.asc(), Comment.id.asc(),
    ).all()
    return [c.to_dict() for c in rows]


def count_comments(tenant_id: int, entity_type: str, entity_id: int) -> int:
    return _query(tenant_id, entity_type, entity_id).count()


# ── Write ────────────────────────────────────────────────────────────────

def create_comment(tenant_id: int, user, entity_type: str, entity_id: int, content) -> dict:
    _check_parent(tenant_id, entity_type, entity_id)
    content = _clean_content(content)

    comment = Comment(
        tenant_id=tenant_id,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user.id,
        content=content,
    )
    db.session.add(comment)
    commit_or_raise("Comment")
    logger.info(
        "Comment added to %s %s",
        entity_type,
        entity_id,
        extra={"tenant_id": tenant_id, "event_type": "comment_created"},
    )
    return comment.to_dict()


def update_comment(tenant_id: int, user, comment_id: int, content) -> dict:
    comment = get_scoped(Comment, comment_id, tenant_id=tenant_id)
    if not _can_modify(comment, user):
        raise forbidden("Only the author or an admin can edit this comment")
    comment.content = _clean_content(content)
    commit_or_raise("Comment")
    return comment.to_dict()


def delete_comment(tenant_id: int, user, comment_id: int) -> None:
    comment = get_scoped(Comment, comment_id, tenant_id=tenant_id)
    if not _can_modify(comment, user):
        raise forbidden("Only the author or an admin can delete this comment")
    db.session.delete(comment)
    commit_or_raise("Comment")


def delete_for_entity(tenant_id: int, entity_type: str, entity_id: int) -> int:
    """Remove all comments of a parent that is being deleted. Does not commit."""
    return _query(tenant_id, entity_type, entity_id).delete(synchronize_session=False)
