from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import validates
import enum

from giving_api.models.base import Base, Currency, generate_id, enum_column_type


class DonationStatus(str, enum.Enum):
    """Donation status, mirroring the payment provider's payment intent states"""
    INITIAL = "initial"
    WAITING = "waiting"
    REQUIRES_ACTION = "requires_action"
    REQUIRES_CAPTURE = "requires_capture"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    PAYMENT_FAILED = "payment_failed"
    DECLINED = "declined"
    INVALID = "invalid"
    REFUND = "refund"
    DELETED = "deleted"


class DonationType(str, enum.Enum):
    DONATION = "donation"
    SUBSCRIPTION = "subscription"
    OTHER = "other"


class PaymentProvider(str, enum.Enum):
    STRIPE = "stripe"
    PAYPAL = "paypal"
    EPAY = "epay"
    BANK = "bank"
    CASH = "cash"
    NONE = "none"


PENDING_STATUSES = frozenset({
    DonationStatus.INITIAL,
    DonationStatus.WAITING,
    DonationStatus.REQUIRES_ACTION,
    DonationStatus.REQUIRES_CAPTURE,
    DonationStatus.REQUIRES_CONFIRMATION,
    DonationStatus.REQUIRES_PAYMENT_METHOD,
})

TERMINAL_STATUSES = frozenset({
    DonationStatus.CANCELLED,
    DonationStatus.PAYMENT_FAILED,
    DonationStatus.DECLINED,
    DonationStatus.INVALID,
    DonationStatus.REFUND,
    DonationStatus.DELETED,
})

# Statuses reachable from each non-pending status, besides itself
ALLOWED_TRANSITIONS = {
    DonationStatus.SUCCEEDED: frozenset({DonationStatus.REFUND, DonationStatus.DELETED}),
    **{status: frozenset() for status in TERMINAL_STATUSES},
}


def can_transition(current: DonationStatus, new: DonationStatus) -> bool:
    """Statuses only move forward: pending -> anything but initial, succeeded -> refund/deleted, terminal -> itself"""
    if current == new:
        return True
    if current in PENDING_STATUSES:
        return new != DonationStatus.INITIAL
    return new in ALLOWED_TRANSITIONS[current]


class Donation(Base):
    """Donation recorded against a campaign vault"""
    __tablename__ = "donations"

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(enum_column_type(DonationType), nullable=False, default=DonationType.DONATION)
    status = Column(enum_column_type(DonationStatus), nullable=False, default=DonationStatus.INITIAL, index=True)
    provider = Column(enum_column_type(PaymentProvider), nullable=False, default=PaymentProvider.NONE)
    currency = Column(enum_column_type(Currency), nullable=False, default=Currency.BGN)
    amount = Column(Integer, nullable=False, default=0)  # Minor currency units
    target_vault_id = Column(String(36), ForeignKey("vaults.id"), nullable=False, index=True)
    person_id = Column(String(36), ForeignKey("persons.id"), nullable=True, index=True)  # Null for anonymous donors
    ext_customer_id = Column(String(255), nullable=True)
    ext_payment_intent_id = Column(String(255), nullable=True, unique=True)
    ext_payment_method_id = Column(String(255), nullable=True)
    billing_email = Column(String(255), nullable=True)
    billing_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @validates("ext_customer_id", "ext_payment_intent_id", "ext_payment_method_id")
    def validate_external_id(self, key, value):
        current = getattr(self, key)
        if current is not None and value != current:
            raise ValueError(f"{key} is already set and cannot be changed")
        return value

    def __repr__(self):
        return f"<Donation(id={self.id}, target_vault_id={self.target_vault_id}, amount={self.amount}, status='{self.status.value}')>"
