from sqlalchemy import Column, String, DateTime, Boolean, func

from giving_api.models.base import Base, generate_id


class Person(Base):
    """Donor or beneficiary contact record"""
    __tablename__ = "persons"

    id = Column(String(36), primary_key=True, default=generate_id)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True, unique=True, index=True)
    phone = Column(String(50), nullable=True)
    company = Column(String(200), nullable=True)
    newsletter = Column(Boolean, nullable=False, default=False)
    identity_provider_id = Column(String(64), nullable=True, unique=True)  # External identity account
    payment_customer_id = Column(String(255), nullable=True)  # Stripe customer
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Person(id={self.id}, email='{self.email}')>"
