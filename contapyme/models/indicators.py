from sqlalchemy import Boolean, Column, Date, Integer, Numeric, String, Text, UniqueConstraint

from contapyme.database import Base
from contapyme.models.audit_mixin import TimestampMixin


class IndicatorConfig(Base, TimestampMixin):
    __tablename__ = "indicator_config"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(30), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    unit = Column(String(10), nullable=False)
    category = Column(String(30), nullable=False)
    format_type = Column(String(20), nullable=False, default="decimal")
    decimal_places = Column(Integer, nullable=False, default=2)
    display_order = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)


class EconomicIndicator(Base, TimestampMixin):
    __tablename__ = "economic_indicators"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(30), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    unit = Column(String(10), nullable=False)
    category = Column(String(30), nullable=False)
    value = Column(Numeric(18, 4), nullable=False)
    date = Column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint('code', 'date', name='_indicator_code_date_uc'),
    )
