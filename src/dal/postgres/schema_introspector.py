import asyncio
import logging
from typing import Any, Dict, List, Optional

from common.interfaces.schema_introspector import SchemaInspector
from common.interfaces.storage import StorageHandle
from common.observability import Telemetry
from dal.index_parsing import IndexColumnParser, ParenthesizedIndexColumnParser
from dal.type_normalization import column_kwargs
from schema import ColumnDef, DatabaseSchema, ForeignKeyDef, IndexDef, TableDef

logger = logging.getLogger(__name__)

# PostGIS catalog tables live in the user schema but are not content tables.
SYSTEM_TABLES = ("geometry_columns", "spatial_ref_sys")


def index_type(row: Dict[str, Any]) -> str:
    """Classify an index; primary wins over unique."""
    if row.get("is_primary"):
        return "primary"
    if row.get("is_unique"):
        return "unique"
    return "secondary"


class PostgresSchemaInspector(SchemaInspector):
    """Postgres implementation of SchemaInspector using information_schema and pg_catalog."""

    def __init__(
        self,
        storage: StorageHandle,
        index_parser: Optional[IndexColumnParser] = None,
    ) -> None:
        """Initialize with an injected storage handle and optional index parser."""
        self._storage = storage
        self._index_parser = index_parser or ParenthesizedIndexColumnParser()

    def get_database_schema(self) -> str:
        return self._storage.schema_name or "public"

    async def _fetch(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        async with self._storage.connection() as conn:
            return await conn.fetch(query, *args)

    async def get_tables(self) -> List[str]:
        """List base tables of the active schema, excluding spatial catalog tables."""
        query = """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = $1
            AND table_type = 'BASE TABLE'
            AND NOT (table_name = ANY($2))
            ORDER BY table_name
        """
        rows = await self._fetch(query, self.get_database_schema(), list(SYSTEM_TABLES))
        return [row["table_name"] for row in rows]

    async def get_columns(self, table_name: str) -> List[ColumnDef]:
        """Get the columns of a table in ordinal order."""
        query = """
            SELECT data_type, column_name, character_maximum_length, column_default, is_nullable
            FROM information_schema.columns
            WHERE table_schema = $1 AND table_name = $2
            ORDER BY ordinal_position
        """
        rows = await self._fetch(query, self.get_database_schema(), table_name)
        return [ColumnDef(**column_kwargs(row)) for row in rows]

    async def get_indexes(self, table_name: str) -> List[IndexDef]:
        """Get the indexes of a table with primary/unique classification."""
        query = """
            SELECT
                ix.indexname AS index_name,
                ix.indexdef AS index_def,
                i.indisunique AS is_unique,
                i.indisprimary AS is_primary
            FROM pg_indexes AS ix
            JOIN pg_namespace AS n ON n.nspname = ix.schemaname
            JOIN pg_class AS c ON c.relname = ix.indexname AND c.relnamespace = n.oid
            JOIN pg_index AS i ON i.indexrelid = c.oid
            WHERE ix.schemaname = $1 AND ix.tablename = $2
            ORDER BY ix.indexname
        """
        rows = await self._fetch(query, self.get_database_schema(), table_name)
        return [
            IndexDef(
                name=row["index_name"],
                columns=self._index_parser.parse(row["index_def"]),
                type=index_type(row),
            )
            for row in rows
        ]

    async def get_foreign_keys(self, table_name: str) -> List[ForeignKeyDef]:
        """Get the foreign keys of a table; constraints are resolved concurrently."""
        query = """
            SELECT constraint_name
            FROM information_schema.table_constraints
            WHERE table_schema = $1
            AND table_name = $2
            AND constraint_type = 'FOREIGN KEY'
            ORDER BY constraint_name
        """
        rows = await self._fetch(query, self.get_database_schema(), table_name)
        return list(
            await asyncio.gather(
                *(self._get_foreign_key(row["constraint_name"], table_name) for row in rows)
            )
        )

    async def _get_foreign_key(self, constraint_name: str, table_name: str) -> ForeignKeyDef:
        columns = await self.get_foreign_key_columns(constraint_name, table_name)
        references = await self.get_foreign_key_references(constraint_name, table_name)
        return ForeignKeyDef(name=constraint_name, columns=columns, **references)

    async def get_foreign_key_columns(self, constraint_name: str, table_name: str) -> List[str]:
        """Owning columns of a constraint, in key order."""
        query = """
            SELECT column_name
            FROM information_schema.key_column_usage
            WHERE constraint_name = $1
            AND table_schema = $2
            AND table_name = $3
            ORDER BY ordinal_position
        """
        rows = await self._fetch(query, constraint_name, self.get_database_schema(), table_name)
        return [row["column_name"] for row in rows]

    async def get_foreign_key_references(
        self, constraint_name: str, table_name: str
    ) -> Dict[str, Any]:
        """Referenced table/columns and referential actions of a constraint.

        Follows the constraint of ``table_name`` to its referential rule, then
        pairs each owning column with the unique-constraint column at its
        ``position_in_unique_constraint``. Referenced columns come back in the
        order of the owning columns.
        """
        schema = self.get_database_schema()
        # Constraint names are only unique per table, so the rule is scoped by table.
        rule_query = """
            SELECT
                rc.update_rule,
                rc.delete_rule,
                rc.unique_constraint_name,
                rc.unique_constraint_schema
            FROM information_schema.referential_constraints AS rc
            JOIN information_schema.table_constraints AS tc
                ON tc.constraint_name = rc.constraint_name
                AND tc.constraint_schema = rc.constraint_schema
            WHERE rc.constraint_name = $1
            AND rc.constraint_schema = $2
            AND tc.table_name = $3
        """
        rules = await self._fetch(rule_query, constraint_name, schema, table_name)
        if not rules:
            logger.warning(
                "No referential rule found for constraint %s on %s", constraint_name, table_name
            )
            return {
                "referenced_table": None,
                "referenced_columns": [],
                "on_update": None,
                "on_delete": None,
            }
        rule = rules[0]

        ref_query = """
            SELECT uk.table_name, uk.column_name
            FROM information_schema.key_column_usage AS fk
            JOIN information_schema.key_column_usage AS uk
                ON uk.constraint_name = $4
                AND uk.constraint_schema = $5
                AND uk.ordinal_position = fk.position_in_unique_constraint
            WHERE fk.constraint_name = $1
            AND fk.table_schema = $2
            AND fk.table_name = $3
            ORDER BY fk.ordinal_position
        """
        ref_rows = await self._fetch(
            ref_query,
            constraint_name,
            schema,
            table_name,
            rule["unique_constraint_name"],
            rule.get("unique_constraint_schema") or schema,
        )
        return {
            "referenced_table": ref_rows[0]["table_name"] if ref_rows else None,
            "referenced_columns": [row["column_name"] for row in ref_rows],
            "on_update": rule["update_rule"],
            "on_delete": rule["delete_rule"],
        }

    async def get_table(self, table_name: str) -> TableDef:
        """Get the full definition of a table (columns, indexes, FKs)."""
        columns, indexes, foreign_keys = await asyncio.gather(
            self.get_columns(table_name),
            self.get_indexes(table_name),
            self.get_foreign_keys(table_name),
        )
        return TableDef(
            name=table_name, columns=columns, indexes=indexes, foreign_keys=foreign_keys
        )

    async def get_schema(self) -> DatabaseSchema:
        """Inspect every table of the active schema."""
        with Telemetry.start_span(
            "schema_inspector.get_schema", {"db.schema": self.get_database_schema()}
        ) as span:
            table_names = await self.get_tables()
            tables = await asyncio.gather(*(self.get_table(name) for name in table_names))
            Telemetry.set_attributes(span, {"schema.table_count": len(tables)})
        logger.info(
            "Inspected %d tables in schema %s", len(table_names), self.get_database_schema()
        )
        return DatabaseSchema(tables=list(tables))
