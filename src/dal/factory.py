"""DAL factory with environment-driven provider selection.

Environment Variables:
    SCHEMA_INSPECTOR_PROVIDER: Provider for SchemaInspector (default: "postgres")

Example:
    >>> storage = await create_storage()
    >>> inspector = get_schema_inspector(storage)
"""

import logging
from typing import Optional

from common.config.storage import StorageConfig
from common.interfaces import SchemaInspector, StorageHandle
from dal.index_parsing import IndexColumnParser
from dal.util.env import get_provider_env

logger = logging.getLogger(__name__)

SCHEMA_INSPECTOR_PROVIDERS: "dict[str, type[SchemaInspector]]" = {}


def _register_defaults() -> None:
    if "postgres" not in SCHEMA_INSPECTOR_PROVIDERS:
        from dal.postgres import PostgresSchemaInspector

        SCHEMA_INSPECTOR_PROVIDERS["postgres"] = PostgresSchemaInspector


def get_schema_inspector(
    storage: StorageHandle,
    provider: Optional[str] = None,
    index_parser: Optional[IndexColumnParser] = None,
) -> SchemaInspector:
    """Build a SchemaInspector bound to ``storage``.

    Provider is ``provider`` when given, else SCHEMA_INSPECTOR_PROVIDER.

    Raises:
        ValueError: If the provider is not registered.
    """
    _register_defaults()
    allowed = set(SCHEMA_INSPECTOR_PROVIDERS.keys())
    if provider is None:
        provider = get_provider_env(
            "SCHEMA_INSPECTOR_PROVIDER", default="postgres", allowed=allowed
        )
    elif provider not in allowed:
        raise ValueError(
            f"Invalid schema inspector provider '{provider}'. "
            f"Allowed values: {', '.join(sorted(allowed))}"
        )
    logger.info(f"Initializing SchemaInspector with provider: {provider}")
    inspector_cls = SCHEMA_INSPECTOR_PROVIDERS[provider]
    return inspector_cls(storage, index_parser=index_parser)


async def create_storage(config: Optional[StorageConfig] = None) -> StorageHandle:
    """Open the PostgreSQL storage handle from ``config`` or the environment."""
    from dal.postgres import PostgresStorage

    return await PostgresStorage.create(config)
