"""
Product Models — goals, initiatives, customers, feedback and ideas.

Hierarchy:
    Goal ──< Initiative ──< Idea >──< Customer
                  │                      │
                  └──────< Feedback >────┘

Every table is tenant-scoped (TenantModel). Cross-entity links are optional
and nullified when the referenced row is deleted; the idea/customer join
rows are removed with either side.
"""

from app.models import db
from app.models.base import TenantModel, iso

# ── Allowed values ───────────────────────────────────────────────────────
GOAL_STATUSES = ("active", "planned", "completed")
INITIATIVE_STATUSES = ("active", "planned", "completed")
INITIATIVE_PRIORITY_RANGE = (1, 5)
CUSTOMER_STATUSES = ("active", "inactive", "prospect")
SENTIMENTS = ("positive", "neutral", "negative")
IDEA_PRIORITIES = ("urgent", "high", "medium", "low")
IDEA_EFFORTS = ("xs", "s", "m", "l", "xl")
IDEA_STATUSES = ("new", "planned", "in_progress", "completed", "rejected")


ideas_customers = db.Table(
    "ideas_customers",
    db.Column(
        "idea_id", db.Integer,
        db.ForeignKey("ideas.id", ondelete="CASCADE"), primary_key=True,
    ),
    db.Column(
        "customer_id", db.Integer,
        db.ForeignKey("customers.id", ondelete="CASCADE"), primary_key=True,
    ),
)


# ═══════════════════════════════════════════════════════════════
# 1. GOALS
# ═══════════════════════════════════════════════════════════════
class Goal(TenantModel):
    __tablename__ = "goals"
    __table_args__ = (
        TenantModel.tenant_composite_index("goals", "status"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    status = db.Column(db.String(20), nullable=False, default="planned")
    target_date = db.Column(db.Date)

    initiatives = db.relationship(
        "Initiative", back_populates="goal", lazy="dynamic", passive_deletes=True,
        order_by="Initiative.priority",
    )

    def to_dict(self, include_initiatives=False):
        d = {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "title": self.title,
            "description": self.description or "",
            "status": self.status,
            "target_date": iso(self.target_date),
            "initiative_count": self.initiatives.count(),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
        if include_initiatives:
            d["initiatives"] = [i.to_dict() for i in self.initiatives.all()]
        return d


# ═══════════════════════════════════════════════════════════════
# 2. INITIATIVES
# ═══════════════════════════════════════════════════════════════
class Initiative(TenantModel):
    __tablename__ = "initiatives"
    __table_args__ = (
        TenantModel.tenant_composite_index("initiatives", "status"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    status = db.Column(db.String(20), nullable=False, default="planned")
    priority = db.Column(db.Integer, nullable=False, default=3)
    goal_id = db.Column(
        db.Integer, db.ForeignKey("goals.id", ondelete="SET NULL"), index=True,
    )

    goal = db.relationship("Goal", back_populates="initiatives")
    ideas = db.relationship(
        "Idea", back_populates="initiative", lazy="dynamic", passive_deletes=True,
    )
    feedback = db.relationship(
        "Feedback", back_populates="initiative", lazy="dynamic", passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "title": self.title,
            "description": self.description or "",
            "status": self.status,
            "priority": self.priority,
            "goal_id": self.goal_id,
            "goal_title": self.goal.title if self.goal else None,
            "idea_count": self.ideas.count(),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


# ═══════════════════════════════════════════════════════════════
# 3. CUSTOMERS
# ═══════════════════════════════════════════════════════════════
class Customer(TenantModel):
    __tablename__ = "customers"
    __table_args__ = (
        TenantModel.tenant_composite_index("customers", "status"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="active")
    revenue = db.Column(db.Numeric(14, 2))

    ideas = db.relationship(
        "Idea", secondary=ideas_customers, back_populates="customers",
        lazy="dynamic", passive_deletes=True,
    )
    feedback = db.relationship(
        "Feedback", back_populates="customer", lazy="dynamic", passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "status": self.status,
            "revenue": float(self.revenue) if self.revenue is not None else None,
            "idea_count": self.ideas.count(),
            "feedback_count": self.feedback.count(),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


# ═══════════════════════════════════════════════════════════════
# 4. FEEDBACK
# ═══════════════════════════════════════════════════════════════
class Feedback(TenantModel):
    __tablename__ = "feedback"
    __table_args__ = (
        TenantModel.tenant_composite_index("feedback", "sentiment"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, default="")
    sentiment = db.Column(db.String(20), nullable=False, default="neutral")
    customer_id = db.Column(
        db.Integer, db.ForeignKey("customers.id", ondelete="SET NULL"), index=True,
    )
    initiative_id = db.Column(
        db.Integer, db.ForeignKey("initiatives.id", ondelete="SET NULL"), index=True,
    )

    customer = db.relationship("Customer", back_populates="feedback")
    initiative = db.relationship("Initiative", back_populates="feedback")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "title": self.title,
            "content": self.title,
            "description": self.description or "",
            "sentiment": self.sentiment,
            "customer_id": self.customer_id,
            "customer_name": self.customer.name if self.customer else None,
            "initiative_id": self.initiative_id,
            "initiative_title": self.initiative.title if self.initiative else None,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


# ═══════════════════════════════════════════════════════════════
# 5. IDEAS
# ═══════════════════════════════════════════════════════════════
class Idea(TenantModel):
    __tablename__ = "ideas"
    __table_args__ = (
        TenantModel.tenant_composite_index("ideas", "status"),
        TenantModel.tenant_composite_index("ideas", "priority"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    priority = db.Column(db.String(20), nullable=False, default="medium")
    effort = db.Column(db.String(5), nullable=False, default="m")
    status = db.Column(db.String(20), nullable=False, default="new")
    source = db.Column(db.String(50), nullable=False, default="internal")
    initiative_id = db.Column(
        db.Integer, db.ForeignKey("initiatives.id", ondelete="SET NULL"), index=True,
    )

    initiative = db.relationship("Initiative", back_populates="ideas")
    customers = db.relationship(
        "Customer", secondary=ideas_customers, back_populates="ideas",
        order_by="Customer.name",
    )

    def to_dict(self):
        customers = [{"id": c.id, "name": c.name} for c in self.customers]
        customer_name = None
        if customers:
            customer_name = customers[0]["name"]
            if len(customers) > 1:
                customer_name += f" (+{len(customers) - 1} more)"
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "title": self.title,
            "description": self.description or "",
            "priority": self.priority,
            "effort": self.effort,
            "status": self.status,
            "source": self.source,
            "initiative_id": self.initiative_id,
            "initiative_title": self.initiative.title if self.initiative else None,
            "customer_ids": [c["id"] for c in customers],
            "customers": customers,
            "customer_id": customers[0]["id"] if customers else None,
            "customer_name": customer_name,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
