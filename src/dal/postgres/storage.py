"""asyncpg-backed storage handle for the content store."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Mapping, Optional, Sequence

import asyncpg

from common.config.storage import StorageConfig
from common.errors import StorageConnectionError

from .quoting import (
    qualified_table,
    quote_identifier,
    render_columns,
    render_order_by,
    render_where,
)

logger = logging.getLogger(__name__)

CONNECTION_ERRORS = (
    OSError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.ConnectionDoesNotExistError,
)


def _affected_rows(status: str) -> int:
    """Parse the row count from a command tag such as ``DELETE 3``."""
    try:
        return int(str(status).rsplit(" ", 1)[-1])
    except ValueError:
        return 0


async def _init_connection(conn) -> None:
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name, encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
        )


class PostgresSession:
    """Query-builder session bound to one asyncpg connection."""

    def __init__(self, conn, schema: Optional[str] = None) -> None:
        """Bind the session to a connection and an optional schema."""
        self._conn = conn
        self._schema = schema

    def _table(self, table: str) -> str:
        return qualified_table(table, self._schema)

    async def _run(self, method: str, query: str, *args: Any):
        try:
            return await getattr(self._conn, method)(query, *args)
        except StorageConnectionError:
            raise
        except CONNECTION_ERRORS as exc:
            raise StorageConnectionError(f"Lost connection to the content store: {exc}") from exc

    async def select(
        self,
        table: str,
        where: Optional[Mapping[str, Any]] = None,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        where_sql, params = render_where(where)
        query = (
            f"SELECT {render_columns(columns)} FROM {self._table(table)}"
            f"{where_sql}{render_order_by(order_by)}"
        )
        rows = await self._run("fetch", query, *params)
        return [dict(row) for row in rows]

    async def first(
        self, table: str, where: Optional[Mapping[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        where_sql, params = render_where(where)
        query = f"SELECT * FROM {self._table(table)}{where_sql}{render_order_by(['id'])} LIMIT 1"
        row = await self._run("fetchrow", query, *params)
        return dict(row) if row is not None else None

    async def count(self, table: str, where: Optional[Mapping[str, Any]] = None) -> int:
        where_sql, params = render_where(where)
        query = f"SELECT COUNT(*) FROM {self._table(table)}{where_sql}"
        return int(await self._run("fetchval", query, *params) or 0)

    async def insert(self, table: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        if not values:
            query = f"INSERT INTO {self._table(table)} DEFAULT VALUES RETURNING *"
            row = await self._run("fetchrow", query)
            return dict(row)
        columns = ", ".join(quote_identifier(c) for c in values)
        placeholders = ", ".join(f"${i}" for i in range(1, len(values) + 1))
        query = (
            f"INSERT INTO {self._table(table)} ({columns}) VALUES ({placeholders}) RETURNING *"
        )
        row = await self._run("fetchrow", query, *values.values())
        return dict(row)

    async def update(
        self, table: str, where: Mapping[str, Any], values: Mapping[str, Any]
    ) -> int:
        if not values:
            return 0
        assignments = ", ".join(
            f"{quote_identifier(column)} = ${i}" for i, column in enumerate(values, start=1)
        )
        where_sql, params = render_where(where, start=len(values) + 1)
        query = f"UPDATE {self._table(table)} SET {assignments}{where_sql}"
        status = await self._run("execute", query, *values.values(), *params)
        return _affected_rows(status)

    async def delete(self, table: str, where: Mapping[str, Any]) -> int:
        if not where:
            raise ValueError(f"Refusing to delete from {table} without a where clause")
        where_sql, params = render_where(where)
        status = await self._run("execute", f"DELETE FROM {self._table(table)}{where_sql}", *params)
        return _affected_rows(status)

    async def fetch(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        rows = await self._run("fetch", query, *args)
        return [dict(row) for row in rows]


class PostgresStorage:
    """Connection pool wrapper implementing the StorageHandle protocol."""

    def __init__(self, pool=None, schema_name: Optional[str] = "public") -> None:
        """Wrap an existing asyncpg pool (or pool-like object)."""
        self._pool = pool
        self._schema_name = schema_name

    @property
    def schema_name(self) -> Optional[str]:
        return self._schema_name

    @classmethod
    async def create(cls, config: Optional[StorageConfig] = None) -> "PostgresStorage":
        """Open a connection pool using ``config`` (or the environment)."""
        config = config or StorageConfig.from_env()
        try:
            pool = await asyncpg.create_pool(
                config.dsn,
                min_size=config.pool_min_size,
                max_size=config.pool_max_size,
                command_timeout=config.command_timeout_seconds,
                init=_init_connection,
                server_settings={"application_name": "cms_content_core"},
            )
        except CONNECTION_ERRORS as exc:
            raise StorageConnectionError(
                f"Failed to connect to {config.user}@{config.host}/{config.db_name}: {exc}"
            ) from exc
        logger.info(
            "Database connection pool established: %s@%s/%s",
            config.user,
            config.host,
            config.db_name,
        )
        return cls(pool, schema_name=config.schema)

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database connection pool closed")

    @asynccontextmanager
    async def _acquire(self):
        if self._pool is None:
            raise StorageConnectionError(
                "Storage pool not initialized. Call PostgresStorage.create() first."
            )
        try:
            conn = await self._pool.acquire()
        except CONNECTION_ERRORS as exc:
            raise StorageConnectionError(f"Failed to acquire a database connection: {exc}") from exc
        try:
            yield conn
        finally:
            await self._pool.release(conn)

    @asynccontextmanager
    async def connection(self):
        """Yield an auto-commit session."""
        async with self._acquire() as conn:
            yield PostgresSession(conn, self._schema_name)

    @asynccontextmanager
    async def transaction(self):
        """Yield a session whose statements commit together or roll back together."""
        async with self._acquire() as conn:
            async with conn.transaction():
                yield PostgresSession(conn, self._schema_name)
