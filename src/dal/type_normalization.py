"""Map native PostgreSQL column types onto the portable semantic vocabulary."""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional

_ROOT_TYPE = re.compile(r"[^(), ]+")


class SemanticColumnType(NamedTuple):
    """A semantic type together with its type-specific arguments."""

    type: str
    args: List[Any]


def root_type_name(native_type: Optional[str]) -> str:
    """Lower-case a native type and keep the first token before parens/commas/spaces."""
    match = _ROOT_TYPE.search((native_type or "").lower())
    return match.group(0) if match else ""


def _timestamp(native_type: str, _max_length: Optional[int]) -> SemanticColumnType:
    use_tz = "with time zone" in native_type.lower()
    return SemanticColumnType("datetime", [{"useTz": use_tz, "precision": 6}])


def _string(_native_type: str, max_length: Optional[int]) -> SemanticColumnType:
    return SemanticColumnType("string", [max_length])


def _fixed(type_name: str, *args: Any) -> Callable[[str, Optional[int]], SemanticColumnType]:
    def build(_native_type: str, _max_length: Optional[int]) -> SemanticColumnType:
        return SemanticColumnType(type_name, [dict(a) if isinstance(a, dict) else a for a in args])

    return build


POSTGRES_TYPE_MAP: Mapping[str, Callable[[str, Optional[int]], SemanticColumnType]] = {
    "integer": _fixed("integer"),
    "text": _fixed("text", "longtext"),
    "boolean": _fixed("boolean"),
    "character": _string,
    "timestamp": _timestamp,
    "date": _fixed("date"),
    "time": _fixed("time", {"precision": 3}),
    "numeric": _fixed("decimal", 10, 2),
    "real": _fixed("double"),
    "double": _fixed("double"),
    "bigint": _fixed("bigInteger"),
    "json": _fixed("json"),
    "jsonb": _fixed("json"),
}


def to_semantic_type(
    native_type: Optional[str], character_maximum_length: Optional[int] = None
) -> SemanticColumnType:
    """Resolve a native type string to a semantic type.

    Never raises: unmapped types fall back to ``specificType`` carrying the raw
    native type string.
    """
    raw = native_type if isinstance(native_type, str) else str(native_type or "")
    builder = POSTGRES_TYPE_MAP.get(root_type_name(raw))
    if builder is None:
        return SemanticColumnType("specificType", [raw])
    return builder(raw, character_maximum_length)


def normalize_default(column_default: Optional[str]) -> Optional[str]:
    """Drop sequence-generator defaults; they are an auto-increment concern."""
    if column_default and "nextval(" in column_default:
        return None
    return column_default


def column_kwargs(row: Dict[str, Any]) -> Dict[str, Any]:
    """Build ColumnDef keyword arguments from an information_schema.columns row."""
    semantic = to_semantic_type(row.get("data_type"), row.get("character_maximum_length"))
    return {
        "name": row["column_name"],
        "type": semantic.type,
        "args": semantic.args,
        "default_to": normalize_default(row.get("column_default")),
        "not_nullable": row.get("is_nullable") == "NO",
        "unsigned": False,
    }
