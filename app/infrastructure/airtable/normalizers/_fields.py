"""Raw field validation and patch building shared by all normalizers.

Each entity declares its raw shape as a TypedDict (total=False). read_fields()
validates a record's fields against it once: declared keys are coerced to
the declared type, ill-typed values are dropped, unknown keys are ignored.
Normalizers then only apply defaults, never type checks.
"""

import logging
from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any, get_args, get_origin, get_type_hints

from app.application.dtos.attachment import Attachment
from app.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)

_MISSING = object()


@lru_cache(maxsize=None)
def _schema_types(schema: type) -> dict[str, Any]:
    return get_type_hints(schema)


def _number_text(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _coerce_scalar(value: Any, expected: type) -> Any:
    # Lookup and rollup columns come back as lists; scalars take the first item.
    if isinstance(value, list):
        for item in value:
            coerced = _coerce_scalar(item, expected)
            if coerced is not _MISSING:
                return coerced
        return _MISSING
    if expected is str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return _number_text(value)
        if isinstance(value, dict) and isinstance(value.get("name"), str):
            return value["name"]
        return _MISSING
    if expected is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        return _MISSING
    if expected in (int, float):
        if isinstance(value, bool):
            return _MISSING
        if isinstance(value, (int, float)):
            return expected(value)
        if isinstance(value, str):
            try:
                return expected(float(value.strip()))
            except ValueError:
                return _MISSING
        return _MISSING
    if expected is dict:
        return value if isinstance(value, dict) else _MISSING
    return value


def _coerce(value: Any, expected: Any) -> Any:
    if get_origin(expected) is list:
        args = get_args(expected)
        item_type = args[0] if args else Any
        items = value if isinstance(value, list) else [value]
        if item_type is Any:
            return list(items)
        out = []
        for item in items:
            if isinstance(item, list):
                continue
            coerced = _coerce_scalar(item, item_type)
            if coerced is not _MISSING:
                out.append(coerced)
        return out
    return _coerce_scalar(value, expected)


def read_fields(fields: Mapping[str, Any] | None, schema: type) -> dict[str, Any]:
    """Validate raw fields against an entity's raw schema.

    Never raises: values that cannot be coerced to the declared type are
    dropped (and logged at DEBUG) so the normalizer falls back to defaults.

    Args:
        fields: Raw fields of one record (may be None).
        schema: TypedDict describing the entity's columns.

    Returns:
        Dict containing only declared, well-typed keys.
    """
    if not fields:
        return {}
    types = _schema_types(schema)
    out: dict[str, Any] = {}
    for name, expected in types.items():
        if name not in fields or fields[name] is None:
            continue
        coerced = _coerce(fields[name], expected)
        if coerced is _MISSING:
            logger.debug(
                "Dropping %s.%s: %r is not %s", schema.__name__, name, fields[name], expected
            )
            continue
        out[name] = coerced
    return out


def first_id(values: list[str] | None) -> str | None:
    """First linked-record id, or None when the link is empty."""
    return values[0] if values else None


def text_or_none(value: str | None) -> str | None:
    return value or None


def link(value: str | list[str] | None) -> list[str]:
    """Linked-record column value for a single id, a list of ids or None."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [v for v in value if v]


def attachments_from(raw: list[dict] | None) -> list[Attachment]:
    """Attachment column -> Attachment DTOs (entries without url are skipped)."""
    out: list[Attachment] = []
    for item in raw or []:
        url = item.get("url")
        if not isinstance(url, str) or not url:
            continue
        size = item.get("size")
        out.append(
            Attachment(
                id=str(item.get("id") or ""),
                url=url,
                filename=str(item.get("filename") or ""),
                size=int(size) if isinstance(size, (int, float)) and not isinstance(size, bool) else 0,
                content_type=str(item.get("type") or ""),
            )
        )
    return out


def attachments_to(files: list[Attachment | Mapping[str, Any]] | None) -> list[dict[str, Any]]:
    """Attachment DTOs (or plain dicts) -> attachment column write value.

    Existing attachments keep their id so the store does not re-upload them.
    """
    out: list[dict[str, Any]] = []
    for item in files or []:
        if isinstance(item, Attachment):
            url, filename, att_id = item.url, item.filename, item.id
        else:
            url = item.get("url")
            filename = item.get("filename") or ""
            att_id = item.get("id") or ""
        if not url:
            raise ValidationException("Attachment url is required", field="files")
        entry: dict[str, Any] = {"url": url}
        if filename:
            entry["filename"] = filename
        if att_id:
            entry["id"] = att_id
        out.append(entry)
    return out


def build_patch(
    updates: Mapping[str, Any],
    field_map: Mapping[str, str],
    *,
    entity: str,
    converters: Mapping[str, Callable[[Any], Any]] | None = None,
) -> dict[str, Any]:
    """Build a sparse store patch from internal-key updates.

    Only keys present in updates appear in the result; an empty mapping
    yields {}. Defaults are never filled in.

    Args:
        updates: Internal field name -> new value (caller-provided keys only).
        field_map: Internal field name -> store column for writable fields.
        entity: Entity name for error messages.
        converters: Optional per-key value conversion (links, attachments).

    Raises:
        ValidationException: A key is not a writable field of the entity.
    """
    converters = converters or {}
    patch: dict[str, Any] = {}
    for key, value in updates.items():
        column = field_map.get(key)
        if column is None:
            raise ValidationException(f"Unknown {entity} field: {key}", field=key)
        convert = converters.get(key)
        patch[column] = convert(value) if convert else value
    return patch


def writable_values(dto: Any, field_map: Mapping[str, str]) -> dict[str, Any]:
    """Current values of a DTO's writable fields (input for build_patch)."""
    return {key: getattr(dto, key) for key in field_map}
