from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from contapyme.database import Base
from contapyme.models.audit_mixin import TimestampMixin

USER_ROLES = ("ADMIN", "CLIENT", "ACCOUNTANT")


class User(Base, TimestampMixin):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="CLIENT")
    subscription_plan = Column(String(20), nullable=False, default="monthly")
    subscription_status = Column(String(20), nullable=False, default="trial")
    max_companies = Column(Integer, nullable=False, default=1)
    trial_ends_at = Column(DateTime(timezone=True), nullable=True)
    timezone = Column(String, default="America/Santiago")
    language = Column(String(5), default="es")
    is_active = Column(Boolean, default=True)

    companies = relationship("Company", back_populates="owner")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role}, is_active={self.is_active})>"
