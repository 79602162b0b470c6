from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String

from contapyme.database import Base
from contapyme.models.audit_mixin import TimestampMixin


class PayrollLiquidation(Base, TimestampMixin):
    __tablename__ = "payroll_liquidations"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, index=True, nullable=False)
    employee_rut = Column(String(20), index=True, nullable=False)
    employee_name = Column(String(200), nullable=True)
    afp_name = Column(String(50), nullable=True)
    health_institution = Column(String(50), nullable=True)
    period_year = Column(Integer, nullable=False)
    period_month = Column(Integer, CheckConstraint('period_month BETWEEN 1 AND 12'), nullable=False)
    total_taxable_income = Column(Numeric(14, 2), nullable=False, default=0)
    total_deductions = Column(Numeric(14, 2), nullable=False, default=0)
    net_salary = Column(Numeric(14, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="draft")


class PayrollConfig(Base, TimestampMixin):
    __tablename__ = "payroll_config"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, index=True, nullable=False)
    employee_rut = Column(String(20), index=True, nullable=False)
    afp_name = Column(String(50), nullable=True)
    health_institution = Column(String(50), nullable=True)
