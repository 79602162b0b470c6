from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from contapyme.schemas.auth import RegisterRequest
from contapyme.schemas.companies import CompanyCreate
from contapyme.schemas.fixed_assets import FixedAssetCreate
from contapyme.schemas.indicators import IndicatorUpdate
from contapyme.schemas.journal_entry import JournalEntryCreate


def journal_payload(lines):
    return {
        "entry_date": "2024-03-15",
        "description": "Compra de insumos",
        "lines": lines,
    }


class TestJournalEntryCreate:
    def test_balanced_entry(self):
        entry = JournalEntryCreate(**journal_payload([
            {"account_code": "6.2.1.001", "debit_amount": 1000},
            {"account_code": "1.1.1.001", "credit_amount": 1000},
        ]))
        assert entry.total_debit == Decimal("1000")
        assert entry.total_credit == Decimal("1000")
        assert entry.entry_type == "manual"

    def test_requires_two_lines(self):
        with pytest.raises(ValidationError, match="Se requieren al menos 2 líneas"):
            JournalEntryCreate(**journal_payload([
                {"account_code": "1.1.1.001", "debit_amount": 1000},
            ]))

    def test_rejects_unbalanced_entry(self):
        with pytest.raises(ValidationError, match="El asiento debe estar balanceado"):
            JournalEntryCreate(**journal_payload([
                {"account_code": "6.2.1.001", "debit_amount": 1000},
                {"account_code": "1.1.1.001", "credit_amount": 900},
            ]))

    def test_rejects_one_cent_difference(self):
        with pytest.raises(ValidationError, match="El asiento debe estar balanceado"):
            JournalEntryCreate(**journal_payload([
                {"account_code": "6.2.1.001", "debit_amount": "100.00"},
                {"account_code": "1.1.1.001", "credit_amount": "100.01"},
            ]))

    def test_rejects_negative_amounts(self):
        with pytest.raises(ValidationError):
            JournalEntryCreate(**journal_payload([
                {"account_code": "6.2.1.001", "debit_amount": -10},
                {"account_code": "1.1.1.001", "credit_amount": -10},
            ]))


class TestIndicatorUpdate:
    def test_accepts_zero_and_positive_numbers(self):
        assert IndicatorUpdate(code="uf", value=0).value == 0
        assert IndicatorUpdate(code="uf", value=39500.5).value == 39500.5

    def test_rejects_negative_value(self):
        with pytest.raises(ValidationError, match="El valor debe ser un número positivo"):
            IndicatorUpdate(code="uf", value=-1)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_rejects_non_finite_value(self, value):
        with pytest.raises(ValidationError, match="El valor debe ser un número positivo"):
            IndicatorUpdate(code="uf", value=value)

    def test_rejects_non_numeric_value(self):
        with pytest.raises(ValidationError):
            IndicatorUpdate(code="uf", value="39500")

    def test_requires_code(self):
        with pytest.raises(ValidationError, match="Código y valor son requeridos"):
            IndicatorUpdate(code="  ", value=1)


class TestCompanyCreate:
    def test_strips_required_fields(self):
        company = CompanyCreate(business_name="  Pyme SpA ", rut=" 76.123.456-7 ")
        assert company.business_name == "Pyme SpA"
        assert company.rut == "76.123.456-7"

    def test_blank_rut_is_rejected(self):
        with pytest.raises(ValidationError, match="Faltan datos requeridos"):
            CompanyCreate(business_name="Pyme SpA", rut="")


class TestFixedAssetCreate:
    def test_start_depreciation_defaults_to_purchase_date(self):
        asset = FixedAssetCreate(name="Camioneta", purchase_value=15000000, purchase_date=date(2024, 2, 1), useful_life_years=7)
        assert asset.start_depreciation_date == date(2024, 2, 1)

    def test_residual_cannot_exceed_purchase(self):
        with pytest.raises(ValidationError, match="El valor residual no puede superar el valor de compra"):
            FixedAssetCreate(name="Silla", purchase_value=100, residual_value=200,
                             purchase_date=date(2024, 2, 1), useful_life_years=7)


def test_register_request_falls_back_to_monthly_plan():
    assert RegisterRequest(email="a@b.cl", password="x", name="Ana", selectedPlan="gold").selectedPlan == "monthly"
    assert RegisterRequest(email="a@b.cl", password="x", name="Ana", selectedPlan="annual").selectedPlan == "annual"
