from .base import Base, Currency
from .campaign import Campaign, CampaignState
from .person import Person
from .vault import Vault
from .donation import (
    Donation,
    DonationStatus,
    DonationType,
    PaymentProvider,
    can_transition,
)

__all__ = [
    "Base",
    "Currency",
    "Campaign",
    "CampaignState",
    "Person",
    "Vault",
    "Donation",
    "DonationStatus",
    "DonationType",
    "PaymentProvider",
    "can_transition",
]
