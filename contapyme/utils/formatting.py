from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from dateutil import parser as date_parser

MONTH_NAMES = [
    "", "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]

# es-CL symbols and decimals per currency
CURRENCY_FORMATS = {
    "CLP": ("$", 0),
    "USD": ("US$", 2),
    "EUR": ("€", 2),
    "UF": ("UF ", 2),
}

DATE_NOT_AVAILABLE = "Fecha no disponible"
INVALID_DATE = "Fecha inválida"


def _group_thousands(integer_part: str) -> str:
    groups = []
    while len(integer_part) > 3:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    groups.insert(0, integer_part)
    return ".".join(groups)


def format_currency(amount: Union[int, float, Decimal, None], currency: str = "CLP") -> str:
    """Format an amount the way es-CL displays money: ``$1.234.567``, ``-$500``, ``US$1.234,50``."""
    if amount is None:
        amount = 0
    symbol, decimals = CURRENCY_FORMATS.get(currency.upper(), (f"{currency.upper()} ", 2))

    value = Decimal(str(amount))
    quantum = Decimal(1).scaleb(-decimals)
    value = value.quantize(quantum, rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    amount_str = f"{abs(value):.{decimals}f}"
    if "." in amount_str:
        integer_part, decimal_part = amount_str.split(".")
    else:
        integer_part, decimal_part = amount_str, ""

    formatted = _group_thousands(integer_part)
    if decimal_part:
        formatted = f"{formatted},{decimal_part}"
    return f"{sign}{symbol}{formatted}"


def _parse_date(value: str) -> Optional[date]:
    if "T" in value:
        try:
            return date_parser.isoparse(value)
        except ValueError:
            return None

    if "-" in value:
        parts = value.split("-")
        if len(parts) != 3:
            return None
        try:
            year, month, day = (int(part) for part in parts)
            return date(year, month, day)
        except ValueError:
            return None

    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


def format_date(value: Union[str, date, datetime, None], fmt: str = "short") -> str:
    """
    Render a date for display.

    Accepts ISO timestamps, ``YYYY-MM-DD`` strings and date/datetime objects.
    Short format is ``dd-mm-yyyy``; long is ``15 de marzo de 2024``.
    """
    if value is None:
        return DATE_NOT_AVAILABLE

    if isinstance(value, str):
        if value.strip() == "":
            return DATE_NOT_AVAILABLE
        parsed = _parse_date(value.strip())
        if parsed is None:
            return INVALID_DATE
    elif isinstance(value, (date, datetime)):
        parsed = value
    else:
        return INVALID_DATE

    if fmt == "long":
        return f"{parsed.day} de {MONTH_NAMES[parsed.month].lower()} de {parsed.year}"
    return parsed.strftime("%d-%m-%Y")


def format_period(period: str) -> str:
    """``202403`` -> ``Marzo 2024``. Anything that is not a YYYYMM code comes back unchanged."""
    if len(period) != 6:
        return period

    year = period[:4]
    month = period[4:6]
    if not month.isdigit() or not 1 <= int(month) <= 12:
        return period

    return f"{MONTH_NAMES[int(month)]} {year}"
