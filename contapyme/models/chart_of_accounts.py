from sqlalchemy import Boolean, Column, Integer, String, Text, UniqueConstraint

from contapyme.database import Base
from contapyme.models.audit_mixin import TimestampMixin


class ChartOfAccounts(Base, TimestampMixin):
    __tablename__ = "chart_of_accounts"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, nullable=True, index=True)
    code = Column(String(20), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    account_type = Column(String(20), nullable=False)  # ACTIVO, PASIVO, PATRIMONIO, INGRESO, GASTO
    level_type = Column(String(20), nullable=False)  # 1er Nivel, 2do Nivel, 3er Nivel, Imputable
    level = Column(Integer, nullable=False, default=1)
    parent_code = Column(String(20), nullable=True, index=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    is_detail = Column(Boolean, default=False)

    __table_args__ = (
        UniqueConstraint('company_id', 'code', name='_company_account_code_uc'),
    )
