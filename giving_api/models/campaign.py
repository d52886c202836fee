from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, func
import enum

from giving_api.models.base import Base, Currency, generate_id, enum_column_type


class CampaignState(str, enum.Enum):
    """Campaign lifecycle stage. Transitions happen outside this service."""
    INITIAL = "initial"
    DRAFT = "draft"
    PENDING_VALIDATION = "pending_validation"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    ACTIVE_PENDING_VALIDATION = "active_pending_validation"
    SUSPENDED = "suspended"
    COMPLETE = "complete"
    DISABLED = "disabled"
    ERROR = "error"
    DELETED = "deleted"


class Campaign(Base):
    """Fundraising campaign"""
    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(200), nullable=False, index=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    state = Column(enum_column_type(CampaignState), nullable=False, default=CampaignState.INITIAL)
    allow_donation_on_complete = Column(Boolean, nullable=False, default=False)
    target_amount = Column(Integer, nullable=False, default=0)  # Minor currency units
    currency = Column(enum_column_type(Currency), nullable=False, default=Currency.BGN)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def accepts_donations(self) -> bool:
        """A complete campaign only takes donations when explicitly allowed"""
        if self.state == CampaignState.COMPLETE:
            return bool(self.allow_donation_on_complete)
        return True

    def __repr__(self):
        return f"<Campaign(id={self.id}, slug='{self.slug}', state='{self.state.value}')>"
