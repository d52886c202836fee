from .campaign import (
    CreateCampaignRequest,
    CampaignResponse,
    CampaignListResponse,
)
from .checkout import (
    CheckoutMode,
    CreateSessionRequest,
    CheckoutSessionResponse,
)
from .donation import (
    UpdateDonationRequest,
    DonationResponse,
    DonationListResponse,
    PublicDonationResponse,
    PublicDonationListResponse,
)
from .person import (
    CreatePersonRequest,
    PersonResponse,
)
from .vault import (
    CreateVaultRequest,
    VaultResponse,
    VaultListResponse,
)

__all__ = [
    "CreateCampaignRequest",
    "CampaignResponse",
    "CampaignListResponse",
    "CheckoutMode",
    "CreateSessionRequest",
    "CheckoutSessionResponse",
    "UpdateDonationRequest",
    "DonationResponse",
    "DonationListResponse",
    "PublicDonationResponse",
    "PublicDonationListResponse",
    "CreatePersonRequest",
    "PersonResponse",
    "CreateVaultRequest",
    "VaultResponse",
    "VaultListResponse",
]
