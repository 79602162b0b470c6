from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from contapyme.database import Base
from contapyme.models.audit_mixin import TimestampMixin


class Company(Base, TimestampMixin):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    business_name = Column(String(200), nullable=False)
    legal_name = Column(String(200), nullable=True)
    rut = Column(String(20), nullable=False, index=True)
    industry_sector = Column(String(100), nullable=True)
    address = Column(String, nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)

    owner = relationship("User", back_populates="companies")

    __table_args__ = (
        UniqueConstraint('user_id', 'rut', name='_company_user_rut_uc'),
    )
