"""
Record Store Filters
====================
Filter objects for record store queries.

Each filter can render itself as an Airtable formula (``render``) and can be
evaluated against a row's fields in Python (``matches``). Caller-supplied
values never reach the formula text except through ``_string_literal`` and
``_number_literal``, so a crafted identity or date cannot change the shape of
the query (for example break out of ``{guardian_id} = '...'`` and widen it).

Usage:
    f = And(Or(Eq("student_id", "S1"), Eq("student_id", "S2")),
            Gte("date", "2024-01-01"), Lte("date", "2024-12-31"))
    store.find("absences", f)
"""
import re

from school_assistant.errors import InvalidQueryValue

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_ ]*$")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _field_ref(name):
    if not isinstance(name, str) or not _FIELD_NAME.match(name):
        raise ValueError(f"Invalid field name: {name!r}")
    return "{" + name + "}"


def _require_value(field, value):
    # None has no formula literal; an empty cell is not a value
    if value is None:
        raise ValueError(f"No value to compare {{{field}}} against")
    return value


def _string_literal(value):
    """Quote a value as a formula string literal."""
    text = str(value)
    if _CONTROL_CHARS.search(text):
        raise InvalidQueryValue()
    text = text.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


def _number_literal(value):
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidQueryValue()
    return str(number)


def _as_text(value):
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Filter:
    """Base class. Subclasses implement render() and matches()."""

    def render(self):
        raise NotImplementedError

    def matches(self, fields):
        raise NotImplementedError

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"<{type(self).__name__} {self.render()}>"


class Eq(Filter):
    """Field equals value. ``trim`` compares against TRIM() of the stored value."""

    def __init__(self, field, value, trim=False):
        _field_ref(field)
        self.field = field
        self.value = _require_value(field, value)
        self.trim = trim

    def render(self):
        ref = _field_ref(self.field)
        if self.trim:
            ref = f"TRIM({ref})"
        return f"{ref} = {_string_literal(self.value)}"

    def matches(self, fields):
        stored = _as_text(fields.get(self.field))
        if self.trim:
            stored = stored.strip()
        return stored == _as_text(self.value)


class _Compare(Filter):
    op = None

    def __init__(self, field, value):
        _field_ref(field)
        self.field = field
        self.value = _require_value(field, value)

    def render(self):
        return f"{_field_ref(self.field)} {self.op} {_string_literal(self.value)}"

    def _compare(self, stored, value):
        raise NotImplementedError

    def matches(self, fields):
        stored = fields.get(self.field)
        if stored in (None, ""):
            return False
        return self._compare(_as_text(stored), _as_text(self.value))


class Gte(_Compare):
    """Inclusive lower bound (ISO dates compare as text)."""

    op = ">="

    def _compare(self, stored, value):
        return stored >= value


class Lte(_Compare):
    """Inclusive upper bound."""

    op = "<="

    def _compare(self, stored, value):
        return stored <= value


class _Group(Filter):
    function = None

    def __init__(self, *filters):
        if not filters:
            raise ValueError(f"{self.function}() needs at least one filter")
        for f in filters:
            if not isinstance(f, Filter):
                raise TypeError(f"Expected a Filter, got {type(f).__name__}")
        self.filters = filters

    def render(self):
        return f"{self.function}(" + ", ".join(f.render() for f in self.filters) + ")"


class And(_Group):
    function = "AND"

    def matches(self, fields):
        return all(f.matches(fields) for f in self.filters)


class Or(_Group):
    function = "OR"

    def matches(self, fields):
        return any(f.matches(fields) for f in self.filters)


class RangeContains(Filter):
    """A "low-high" text field (e.g. grade_levels "3-5") contains a number.

    Split on the first "-": int(low) <= number <= int(high).
    """

    def __init__(self, field, number):
        _field_ref(field)
        self.field = field
        self.number = int(_number_literal(number))

    def render(self):
        ref = _field_ref(self.field)
        n = self.number
        return (
            f'AND(VALUE(LEFT({ref}, FIND("-", {ref}) - 1)) <= {n}, '
            f'VALUE(RIGHT({ref}, LEN({ref}) - FIND("-", {ref}))) >= {n})'
        )

    def matches(self, fields):
        bounds = parse_range(fields.get(self.field))
        if bounds is None:
            return False
        low, high = bounds
        return low <= self.number <= high


def parse_range(value):
    """Parse "3-5" into (3, 5). Returns None when malformed."""
    if value is None:
        return None
    low, sep, high = str(value).partition("-")
    if not sep:
        return None
    try:
        return int(low.strip()), int(high.strip())
    except ValueError:
        return None
