"""Document service over a relational store.

A document is identified by ``document_id`` and stored as one row per
(locale, status). Drafts have ``published_at = NULL``; published rows are
copies of a draft made by ``publish``. Every mutation runs in one
transaction provided by the injected storage handle.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from common.config.documents import DocumentConfig
from common.errors import NotFoundError, ValidationError
from common.interfaces.storage import NOT_NULL, StorageHandle, StorageSession
from common.observability import Telemetry
from dal.metadata import ContentTypeRegistry
from documents.cascade import resolve_cascade_plan
from documents.components import ComponentWriter
from documents.params import (
    SYSTEM_COLUMNS,
    published_at_filter,
    resolve_locale,
    resolve_locale_scope,
    split_data,
    validate_delete_status,
    validate_status,
)
from schema import DRAFT, PUBLISHED, DeleteResult, DocumentVersion

logger = logging.getLogger(__name__)


def generate_document_id() -> str:
    """Return a new 24-character document id."""
    return uuid.uuid4().hex[:24]


def _utcnow() -> datetime:
    # Stored in timestamp-without-time-zone columns.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DocumentService:
    """Create, update, publish, delete and read the documents of one content type."""

    def __init__(
        self,
        storage: StorageHandle,
        registry: ContentTypeRegistry,
        uid: str,
        config: Optional[DocumentConfig] = None,
    ) -> None:
        """Bind the service to a storage handle and a registered content type.

        Raises:
            KeyError: If ``uid`` is not registered.
        """
        self._storage = storage
        self._registry = registry
        self._content_type = registry.get(uid)
        self._config = config or DocumentConfig.from_env()
        self._components = ComponentWriter(registry)

    @property
    def uid(self) -> str:
        return self._content_type.uid

    @property
    def table(self) -> str:
        return self._content_type.table_name

    def _span(self, operation: str, **attributes: Any):
        return Telemetry.start_span(
            f"documents.{operation}",
            {"cms.content_type": self.uid, "cms.operation": operation, **attributes},
        )

    async def _to_version(self, session: StorageSession, row: Mapping[str, Any]) -> DocumentVersion:
        component_refs, dynamic_zone_refs = await self._components.load_refs(
            session, self._content_type, row["id"]
        )
        return DocumentVersion(
            id=row["id"],
            document_id=row["document_id"],
            locale=row["locale"],
            status=PUBLISHED if row.get("published_at") is not None else DRAFT,
            published_at=row.get("published_at"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            fields={k: v for k, v in row.items() if k not in SYSTEM_COLUMNS},
            component_refs=component_refs,
            dynamic_zone_refs=dynamic_zone_refs,
        )

    # Reads

    async def find_one(
        self, document_id: str, locale: Optional[str] = None, status: Optional[str] = None
    ) -> Optional[DocumentVersion]:
        """Return the version of ``document_id`` for a locale and status (draft by default)."""
        status = validate_status(status, default=DRAFT)
        locale = resolve_locale(locale, self._config, strict=False)
        async with self._storage.connection() as session:
            row = await session.first(
                self.table,
                {
                    "document_id": document_id,
                    "locale": locale,
                    "published_at": published_at_filter(status),
                },
            )
            if row is None:
                return None
            return await self._to_version(session, row)

    async def find_many(
        self,
        locale: Optional[str] = None,
        status: Optional[str] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[DocumentVersion]:
        """List versions in a locale (``*`` for all) and status, filtered by scalar fields."""
        where = self._list_where(locale, status, filters)
        async with self._storage.connection() as session:
            rows = await session.select(self.table, where, order_by=["id"])
            return [await self._to_version(session, row) for row in rows]

    async def count(
        self,
        locale: Optional[str] = None,
        status: Optional[str] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> int:
        """Count versions matching the same criteria as ``find_many``."""
        where = self._list_where(locale, status, filters)
        async with self._storage.connection() as session:
            return await session.count(self.table, where)

    async def find_versions(self, document_id: str) -> List[DocumentVersion]:
        """Every stored version of a document across locales and statuses."""
        async with self._storage.connection() as session:
            rows = await session.select(
                self.table, {"document_id": document_id}, order_by=["locale", "id"]
            )
            return [await self._to_version(session, row) for row in rows]

    def _list_where(
        self,
        locale: Optional[str],
        status: Optional[str],
        filters: Optional[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        status = validate_status(status, default=DRAFT)
        where: Dict[str, Any] = {}
        for key, value in (filters or {}).items():
            if key != "document_id" and key not in self._content_type.scalar_attributes():
                raise ValidationError(f"Invalid filter key {key}", details={"key": key})
            where[key] = value
        locales = resolve_locale_scope(
            locale if locale is not None else self._config.default_locale, self._config
        )
        if locales is not None:
            where["locale"] = locales[0]
        where["published_at"] = published_at_filter(status)
        return where

    # Writes

    async def create(
        self,
        data: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
        status: Optional[str] = None,
    ) -> DocumentVersion:
        """Create a document as a draft; ``status="published"`` also publishes it."""
        status = validate_status(status, default=DRAFT)
        locale = resolve_locale(locale, self._config, strict=True)
        scalars, children = split_data(self._content_type, data)
        document_id = generate_document_id()

        with self._span("create", **{"cms.locale": locale, "cms.status": status}):
            async with self._storage.transaction() as session:
                row = await self._insert_draft(session, document_id, locale, scalars, children)
                if status == PUBLISHED:
                    await self._publish_drafts(session, [row])
                version = await self._to_version(session, row)

        logger.info("Created %s document %s (%s)", self.uid, document_id, locale)
        return version

    async def _insert_draft(
        self,
        session: StorageSession,
        document_id: str,
        locale: str,
        scalars: Mapping[str, Any],
        children: Mapping[str, Any],
    ) -> Dict[str, Any]:
        now = _utcnow()
        row = await session.insert(
            self.table,
            {
                **scalars,
                "document_id": document_id,
                "locale": locale,
                "published_at": None,
                "created_at": now,
                "updated_at": now,
            },
        )
        await self._components.write(session, self._content_type, row["id"], children)
        return row

    async def update(
        self,
        document_id: str,
        data: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
    ) -> DocumentVersion:
        """Update the draft of a locale, creating that localization if it is missing.

        Component and dynamic-zone fields present in ``data`` are replaced wholesale.

        Raises:
            NotFoundError: If the document has no version in any locale.
        """
        locale = resolve_locale(locale, self._config, strict=True)
        scalars, children = split_data(self._content_type, data)

        with self._span("update", **{"cms.locale": locale}):
            async with self._storage.transaction() as session:
                draft = await session.first(
                    self.table,
                    {"document_id": document_id, "locale": locale, "published_at": None},
                )
                if draft is None:
                    if not await session.count(self.table, {"document_id": document_id}):
                        raise NotFoundError(
                            f"Document {document_id} not found",
                            details={"document_id": document_id},
                        )
                    logger.info("Creating %s localization of document %s", locale, document_id)
                    row = await self._insert_draft(
                        session, document_id, locale, scalars, children
                    )
                else:
                    await session.update(
                        self.table, {"id": draft["id"]}, {**scalars, "updated_at": _utcnow()}
                    )
                    await self._components.replace(
                        session, self._content_type, draft["id"], children
                    )
                    row = await session.first(self.table, {"id": draft["id"]})
                version = await self._to_version(session, row)
        return version

    async def publish(
        self, document_id: str, locale: Optional[str] = None
    ) -> List[DocumentVersion]:
        """Publish the drafts of a locale (every locale when ``locale`` is None or ``*``).

        Any existing published version for the same locale is replaced.

        Raises:
            NotFoundError: If there is no draft in scope.
        """
        locales = resolve_locale_scope(locale, self._config)
        where: Dict[str, Any] = {"document_id": document_id, "published_at": None}
        if locales is not None:
            where["locale"] = locales

        with self._span("publish", **{"cms.locale": locale or "*"}):
            async with self._storage.transaction() as session:
                drafts = await session.select(self.table, where, order_by=["id"])
                if not drafts:
                    raise NotFoundError(
                        f"No draft to publish for document {document_id}",
                        details={"document_id": document_id, "locale": locale},
                    )
                published = await self._publish_drafts(session, drafts)
                versions = [await self._to_version(session, row) for row in published]

        logger.info(
            "Published %s document %s (%s)",
            self.uid,
            document_id,
            ", ".join(v.locale for v in versions),
        )
        return versions

    async def _publish_drafts(
        self, session: StorageSession, drafts: List[Mapping[str, Any]]
    ) -> List[Dict[str, Any]]:
        published = []
        for draft in drafts:
            previous = await session.select(
                self.table,
                {
                    "document_id": draft["document_id"],
                    "locale": draft["locale"],
                    "published_at": NOT_NULL,
                },
                columns=["id"],
            )
            if previous:
                plan = await resolve_cascade_plan(
                    session, self._registry, [(self.uid, [row["id"] for row in previous])]
                )
                await plan.execute(session)

            values = {k: v for k, v in draft.items() if k != "id"}
            values["published_at"] = _utcnow()
            row = await session.insert(self.table, values)
            await self._components.clone(session, self._content_type, draft["id"], row["id"])
            published.append(row)
        return published

    async def unpublish(self, document_id: str, locale: Optional[str] = None) -> DeleteResult:
        """Remove the published versions in scope; drafts are kept."""
        return await self.delete(document_id, locale=locale, status=PUBLISHED)

    async def delete(
        self,
        document_id: str,
        locale: Optional[str] = None,
        status: Optional[str] = None,
    ) -> DeleteResult:
        """Delete versions of a document together with every component row they own.

        - no options (or ``locale="*"``): all locales, all statuses
        - ``locale``: both statuses of that locale
        - ``status="published"``: only published rows in the locale scope
        - ``status="draft"``: rejected

        Raises:
            ValidationError: For ``status="draft"`` or an unknown status.
            NotFoundError: If no version matches; nothing is changed.
        """
        status = validate_delete_status(status)
        locales = resolve_locale_scope(locale, self._config)
        where: Dict[str, Any] = {"document_id": document_id}
        if locales is not None:
            where["locale"] = locales
        if status == PUBLISHED:
            where["published_at"] = NOT_NULL

        with self._span("delete", **{"cms.locale": locale or "*", "cms.status": status}) as span:
            async with self._storage.transaction() as session:
                rows = await session.select(self.table, where, columns=["id"], order_by=["id"])
                if not rows:
                    raise NotFoundError(
                        f"Document {document_id} not found",
                        details={"document_id": document_id, "locale": locale, "status": status},
                    )
                version_ids = [row["id"] for row in rows]
                plan = await resolve_cascade_plan(
                    session, self._registry, [(self.uid, version_ids)]
                )
                deleted_rows = await plan.execute(session)
            Telemetry.set_attributes(
                span,
                {
                    "cms.deleted_versions": len(version_ids),
                    "cms.deleted_rows": sum(deleted_rows.values()),
                },
            )

        logger.info(
            "Deleted %d version(s) of %s document %s", len(version_ids), self.uid, document_id
        )
        return DeleteResult(
            document_id=document_id,
            deleted_version_ids=version_ids,
            deleted_rows=deleted_rows,
        )
