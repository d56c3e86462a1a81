"""Builders for Airtable filterByFormula expressions.

Every literal passes through escape() so user input cannot close the
string and inject formula syntax.
"""


def escape(value: str) -> str:
    """Return value as a double-quoted formula string literal."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def field(name: str) -> str:
    """Reference a column: {Name}."""
    return "{" + name + "}"


def field_equals(name: str, value: str) -> str:
    return f"{field(name)}={escape(value)}"


def lower_equals(name: str, value: str) -> str:
    """Case-insensitive equality (used for email lookups)."""
    return f"LOWER({field(name)})={escape(value.lower())}"


def contains_lower(name: str, value: str) -> str:
    """Case-insensitive substring match."""
    return f"SEARCH({escape(value.lower())}, LOWER({field(name)}))"


def find_in(name: str, record_id: str) -> str:
    """True when a linked-record column contains record_id.

    Linked columns render as comma-joined primary values in formulas, so
    ARRAYJOIN is used to search the joined string.
    """
    return f"FIND({escape(record_id)}, ARRAYJOIN({field(name)}))"


def is_true(name: str) -> str:
    return f"{field(name)}=TRUE()"


def after_now(name: str) -> str:
    """Date column strictly in the future."""
    return f"IS_AFTER({field(name)}, NOW())"


def record_id_in(record_ids: list[str]) -> str:
    """Match any of the given record ids."""
    return or_(*(f"RECORD_ID()={escape(rid)}" for rid in record_ids))


def and_(*clauses: str) -> str:
    parts = [c for c in clauses if c]
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return f"AND({', '.join(parts)})"


def or_(*clauses: str) -> str:
    parts = [c for c in clauses if c]
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return f"OR({', '.join(parts)})"
