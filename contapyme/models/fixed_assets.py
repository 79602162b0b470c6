from sqlalchemy import Column, Date, Integer, Numeric, String, Text

from contapyme.database import Base
from contapyme.models.audit_mixin import SoftDeleteMixin, TimestampMixin


class FixedAssetCategory(Base, TimestampMixin):
    __tablename__ = "fixed_assets_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    default_useful_life_years = Column(Integer, nullable=False, default=5)
    default_residual_rate = Column(Numeric(5, 4), nullable=False, default=0)
    asset_account_code = Column(String(20), nullable=True)
    depreciation_account_code = Column(String(20), nullable=True)
    expense_account_code = Column(String(20), nullable=True)


class FixedAsset(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "fixed_assets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False, default="Activo Fijo")

    purchase_value = Column(Numeric(14, 2), nullable=False)
    residual_value = Column(Numeric(14, 2), nullable=False, default=0)
    purchase_date = Column(Date, nullable=False)
    start_depreciation_date = Column(Date, nullable=False)
    useful_life_years = Column(Integer, nullable=False)
    depreciation_method = Column(String(20), nullable=False, default="linear")

    asset_account_code = Column(String(20), nullable=True)
    depreciation_account_code = Column(String(20), nullable=True)
    expense_account_code = Column(String(20), nullable=True)

    status = Column(String(20), nullable=False, default="active")  # active, disposed, fully_depreciated
    disposal_date = Column(Date, nullable=True)
    disposal_value = Column(Numeric(14, 2), nullable=True)

    serial_number = Column(String(100), nullable=True)
    brand = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    location = Column(String(200), nullable=True)
    responsible_person = Column(String(200), nullable=True)
