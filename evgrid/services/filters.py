"""Translate the grid's search box and column filters into SQL predicates."""

import json
import logging
import math
from enum import Enum

from sqlalchemy import Integer, Numeric, String, and_, cast, false, or_, true

from evgrid.db.models import Vehicle, WIRE_NAMES
from evgrid.errors import MalformedFilter

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = [
    Vehicle.brand,
    Vehicle.model,
    Vehicle.body_style,
    Vehicle.segment,
    Vehicle.power_train,
    Vehicle.plug_type,
    Vehicle.rapid_char,
]


class FilterOperator(str, Enum):
    CONTAINS = "contains"
    EQUALS = "equals"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    IS_EMPTY = "isEmpty"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"

    @classmethod
    def parse(cls, raw) -> "FilterOperator":
        try:
            return cls(raw)
        except ValueError:
            return cls.CONTAINS


def _resolve_fields() -> dict:
    """Both the wire name and the attribute name address a column."""
    fields = {}
    for attr, wire in WIRE_NAMES.items():
        column = getattr(Vehicle, attr)
        fields[attr] = column
        fields[wire] = column
    return fields


FIELDS = _resolve_fields()


def resolve_column(name: str):
    column = FIELDS.get(name)
    if column is None:
        raise MalformedFilter(f"Unknown field: {name}")
    return column


def _is_numeric(column) -> bool:
    return isinstance(column.expression.type, (Integer, Numeric))


# INTEGER columns are 32-bit on PostgreSQL
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def _as_text(column):
    return cast(column, String) if _is_numeric(column) else column


def _coerce(column, value):
    """Convert a comparison value to the column's type for numeric columns."""
    if not _is_numeric(column):
        return str(value)
    try:
        number = float(str(value).strip())
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        raise MalformedFilter(f"Value {value!r} is not a number for field {column.key}")
    if isinstance(column.expression.type, Integer) and number.is_integer():
        return int(number)
    return number


def _contains(column, value):
    return _as_text(column).icontains(str(value), autoescape=True)


def _out_of_range(column, number) -> int:
    """-1 below, 1 above the range an INTEGER column can hold, 0 inside it."""
    if not isinstance(column.expression.type, Integer) or isinstance(number, str):
        return 0
    if number < INT_MIN:
        return -1
    if number > INT_MAX:
        return 1
    return 0


def _equals(column, value):
    number = _coerce(column, value)
    if _out_of_range(column, number):
        return false()
    return column == number


def _starts_with(column, value):
    return _as_text(column).startswith(str(value), autoescape=True)


def _ends_with(column, value):
    return _as_text(column).endswith(str(value), autoescape=True)


def _is_empty(column, value):
    if _is_numeric(column):
        return column.is_(None)
    return or_(column.is_(None), column == "")


def _greater_than(column, value):
    number = _coerce(column, value)
    side = _out_of_range(column, number)
    if side > 0:
        return false()
    if side < 0:
        return column.is_not(None)
    return column > number


def _less_than(column, value):
    number = _coerce(column, value)
    side = _out_of_range(column, number)
    if side < 0:
        return false()
    if side > 0:
        return column.is_not(None)
    return column < number


PREDICATE_BUILDERS = {
    FilterOperator.CONTAINS: _contains,
    FilterOperator.EQUALS: _equals,
    FilterOperator.STARTS_WITH: _starts_with,
    FilterOperator.ENDS_WITH: _ends_with,
    FilterOperator.IS_EMPTY: _is_empty,
    FilterOperator.GREATER_THAN: _greater_than,
    FilterOperator.LESS_THAN: _less_than,
}


def parse_filter(raw: str | None) -> dict:
    """Decode the `filter` query parameter into a field -> {operator, value} map."""
    if not raw:
        return {}
    try:
        spec = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid filter JSON: {e}")
        raise MalformedFilter("Invalid filter format")
    if not isinstance(spec, dict):
        raise MalformedFilter("Invalid filter format: expected an object")
    return spec


def search_predicate(search: str):
    return or_(*(column.icontains(search, autoescape=True) for column in SEARCH_COLUMNS))


def field_predicate(field: str, entry):
    """Build the predicate for one filter entry, or None when the entry is inactive."""
    if not isinstance(entry, dict):
        raise MalformedFilter(f"Invalid filter for field {field}: expected an object")

    column = resolve_column(field)
    operator = FilterOperator.parse(entry.get("operator"))
    value = entry.get("value")

    if operator is not FilterOperator.IS_EMPTY and (value is None or value == ""):
        return None
    if isinstance(value, (dict, list)):
        raise MalformedFilter(f"Invalid filter value for field {field}")

    return PREDICATE_BUILDERS[operator](column, value)


def build_predicate(search: str | None = None, filter_spec: dict | None = None):
    """AND together the search predicate and every active filter entry."""
    clauses = []
    if search:
        clauses.append(search_predicate(search))
    for field, entry in (filter_spec or {}).items():
        clause = field_predicate(field, entry)
        if clause is not None:
            clauses.append(clause)

    if not clauses:
        return true()
    return and_(*clauses)
