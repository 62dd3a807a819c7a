"""Validation of caller-supplied document options and data."""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from common.config.documents import DocumentConfig
from common.errors import ValidationError
from common.interfaces.storage import NOT_NULL
from schema import DOCUMENT_STATUSES, DRAFT, PUBLISHED, ContentTypeDef

ALL_LOCALES = "*"

SYSTEM_COLUMNS = frozenset(
    {"id", "document_id", "locale", "published_at", "created_at", "updated_at"}
)


def validate_status(status: Optional[str], default: Optional[str] = None) -> Optional[str]:
    """Return ``status`` (or ``default``) after checking it is draft or published."""
    if status is None:
        return default
    if status not in DOCUMENT_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}'. Expected one of: {', '.join(DOCUMENT_STATUSES)}",
            details={"status": status},
        )
    return status


def validate_delete_status(status: Optional[str]) -> Optional[str]:
    """Only whole documents, whole locales or published versions can be deleted."""
    if status == DRAFT:
        raise ValidationError("Cannot delete a draft document", details={"status": status})
    return validate_status(status)


def published_at_filter(status: str):
    """Where-clause value selecting rows of ``status``."""
    return NOT_NULL if status == PUBLISHED else None


def resolve_locale(locale: Optional[str], config: DocumentConfig, *, strict: bool) -> str:
    """Resolve a single locale, defaulting to the configured default locale.

    With ``strict`` the locale must be one of the configured locales.
    """
    if locale is None:
        return config.default_locale
    if not isinstance(locale, str) or not locale.strip() or locale == ALL_LOCALES:
        raise ValidationError(f"Invalid locale '{locale}'", details={"locale": locale})
    if strict and locale not in config.locales:
        raise ValidationError(
            f"This locale doesn't exist: '{locale}'", details={"locale": locale}
        )
    return locale


def resolve_locale_scope(locale: Optional[str], config: DocumentConfig) -> Optional[List[str]]:
    """None or ``*`` means every locale; anything else is a single-locale scope."""
    if locale is None or locale == ALL_LOCALES:
        return None
    return [resolve_locale(locale, config, strict=False)]


def split_data(
    content_type: ContentTypeDef,
    data: Optional[Mapping[str, Any]],
    ignore: Tuple[str, ...] = (),
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split input into scalar column values and owned-component values.

    Raises:
        ValidationError: On system columns or keys that are not attributes.
    """
    if data is None:
        return {}, {}
    if not isinstance(data, Mapping):
        raise ValidationError(f"Expected an object for {content_type.uid}")
    scalars: Dict[str, Any] = {}
    children: Dict[str, Any] = {}
    for key, value in data.items():
        if key in ignore:
            continue
        if key in SYSTEM_COLUMNS:
            raise ValidationError(f"Cannot set system field '{key}'", details={"key": key})
        attr = content_type.attributes.get(key)
        if attr is None:
            raise ValidationError(
                f"Invalid key {key} for {content_type.uid}", details={"key": key}
            )
        if attr.owns_children:
            children[key] = value
        else:
            scalars[key] = value
    return scalars, children
