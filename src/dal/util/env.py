"""Provider normalization and environment variable helpers.

Canonical Provider IDs (internal, lowercase):
- "postgres" - PostgreSQL implementations

User-Facing Aliases (case-insensitive):
- PostgreSQL: "postgresql", "postgres", "pg"

Example:
    >>> normalize_provider("PostgreSQL")
    'postgres'
    >>> get_provider_env("SCHEMA_INSPECTOR_PROVIDER", "postgres", {"postgres"})
    'postgres'
"""

from typing import Set

from common.config.env import get_env_str

PROVIDER_ALIASES: dict[str, str] = {
    "postgresql": "postgres",
    "postgres": "postgres",
    "pg": "postgres",
}


def normalize_provider(value: str) -> str:
    """Strip, lower-case and resolve aliases; unknown values pass through unchanged."""
    cleaned = value.strip().lower()
    return PROVIDER_ALIASES.get(cleaned, cleaned)


def get_provider_env(var_name: str, default: str, allowed: Set[str]) -> str:
    """Read, normalize and validate a provider environment variable.

    Raises:
        ValueError: If the normalized value is not in ``allowed``.
    """
    raw_value = get_env_str(var_name)
    if raw_value is None:
        return default

    normalized = normalize_provider(raw_value)
    if normalized not in allowed:
        allowed_list = ", ".join(sorted(allowed))
        raise ValueError(
            f"Invalid provider for {var_name}: '{raw_value}'. Allowed values: {allowed_list}"
        )
    return normalized
