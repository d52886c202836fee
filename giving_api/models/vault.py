from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func

from giving_api.models.base import Base, Currency, generate_id, enum_column_type


class Vault(Base):
    """Accumulated balance of a campaign. Only successful donations increment it."""
    __tablename__ = "vaults"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(200), nullable=False)
    currency = Column(enum_column_type(Currency), nullable=False, default=Currency.BGN)
    amount = Column(Integer, nullable=False, default=0)  # Minor currency units
    campaign_id = Column(String(36), ForeignKey("campaigns.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Vault(id={self.id}, campaign_id={self.campaign_id}, amount={self.amount})>"
