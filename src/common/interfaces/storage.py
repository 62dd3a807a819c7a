from typing import (
    Any,
    AsyncContextManager,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)


class _NotNull:
    """Where-clause marker matching any non-NULL value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_NULL"


NOT_NULL = _NotNull()

# Equality map. A list/tuple/set value means IN, None means IS NULL and
# NOT_NULL means IS NOT NULL.
Where = Mapping[str, Any]


@runtime_checkable
class StorageSession(Protocol):
    """Query-builder style access to the tables of one schema.

    A session obtained from ``StorageHandle.transaction()`` is atomic; one from
    ``StorageHandle.connection()`` auto-commits each statement.
    """

    async def select(
        self,
        table: str,
        where: Optional[Where] = None,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Return matching rows as dicts."""
        ...

    async def first(self, table: str, where: Optional[Where] = None) -> Optional[Dict[str, Any]]:
        """Return the first matching row (lowest id), or None."""
        ...

    async def count(self, table: str, where: Optional[Where] = None) -> int:
        """Count matching rows."""
        ...

    async def insert(self, table: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored (including generated id)."""
        ...

    async def update(self, table: str, where: Where, values: Mapping[str, Any]) -> int:
        """Update matching rows and return how many changed."""
        ...

    async def delete(self, table: str, where: Where) -> int:
        """Delete matching rows and return how many were removed."""
        ...

    async def fetch(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        """Run a raw read-only query (catalog introspection)."""
        ...


@runtime_checkable
class StorageHandle(Protocol):
    """Injected storage collaborator: schema scoping, sessions and transactions."""

    @property
    def schema_name(self) -> Optional[str]:
        """Active database schema, or None for the server default."""
        ...

    def connection(self) -> AsyncContextManager[StorageSession]:
        """Yield a non-transactional session."""
        ...

    def transaction(self) -> AsyncContextManager[StorageSession]:
        """Yield a session whose statements commit or roll back together."""
        ...
