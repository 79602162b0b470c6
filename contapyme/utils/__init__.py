from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import inspect

from .formatting import format_currency, format_date, format_period
from .rut import clean_rut, format_rut, is_valid_rut


def model_to_dict(obj):
    """Column values of a mapped row as JSON-ready primitives."""
    if obj is None:
        return None
    result = {}
    for attr in inspect(obj).mapper.column_attrs:
        value = getattr(obj, attr.key)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = float(value)
        result[attr.key] = value
    return result


__all__ = [
    'clean_rut',
    'format_currency',
    'format_date',
    'format_period',
    'format_rut',
    'is_valid_rut',
    'model_to_dict',
]
