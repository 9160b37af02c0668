"""
Comment model — threaded discussion on ideas, feedback and initiatives.

Comments reference their parent by (entity_type, entity_id) rather than a
foreign key; comment_service removes them when the parent is deleted.
"""

from app.models import db
from app.models.base import TenantModel, iso

COMMENT_ENTITY_TYPES = ("idea", "feedback", "initiative")


class Comment(TenantModel):
    __tablename__ = "comments"
    __table_args__ = (
        db.Index("ix_comments_entity", "entity_type", "entity_id"),
    )

    id = db.Column(db.Integer, primary_key=True)
    entity_type = db.Column(db.String(20), nullable=False)
    entity_id = db.Column(db.Integer, nullable=False)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    content = db.Column(db.Text, nullable=False)

    user = db.relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "user_email": self.user.email if self.user else None,
            "user_name": self.user.name if self.user else None,
            "content": self.content,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
