from .campaign import CampaignRepository
from .donation import DonationRepository
from .person import PersonRepository
from .vault import VaultRepository

__all__ = [
    "CampaignRepository",
    "DonationRepository",
    "PersonRepository",
    "VaultRepository",
]
