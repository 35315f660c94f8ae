"""Load, extend and save one target document per reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

import structlog

from ..config import ApiSourceConfig
from ..errors import StorageReadError, StorageWriteError
from ..infra import BaseBlobStore
from .dedup import DeduplicationIndex
from .document import CatalogDocument
from .paginator import PaginationResult, Paginator


@dataclass(slots=True)
class TargetResult:
    """Outcome of reconciling one target document."""

    target: str
    success: bool
    total_count: int
    new_total: int = 0
    duplicate_total: int = 0
    source_results: list[PaginationResult] = field(default_factory=list)

    @property
    def failed_sources(self) -> list[str]:
        return [result.source_name for result in self.source_results if not result.completed]


class StoreReconciler:
    """Merge freshly paginated records into a persisted document."""

    def __init__(
        self,
        store: BaseBlobStore,
        paginator: Paginator,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.store = store
        self.paginator = paginator
        self.logger = logger or structlog.get_logger("catalog_sniper.reconciler")

    def load_document(self, target_key: str) -> tuple[CatalogDocument, DeduplicationIndex]:
        try:
            raw = self.store.load(target_key)
            document = (
                CatalogDocument.from_bytes(raw, key=target_key) if raw is not None else CatalogDocument()
            )
        except StorageReadError as exc:
            self.logger.warning("document_reset", target=target_key, error=str(exc))
            document = CatalogDocument()
        return document, DeduplicationIndex.from_records(document.data)

    def save_document(
        self, target_key: str, document: CatalogDocument, moment: datetime | None = None
    ) -> bool:
        document.stamp(moment)
        try:
            self.store.save(target_key, document.to_bytes())
        except StorageWriteError as exc:
            self.logger.error("document_save_failed", target=target_key, error=str(exc))
            return False
        return True

    def reconcile(self, target_key: str, sources: Iterable[ApiSourceConfig]) -> TargetResult:
        log = self.logger.bind(target=target_key)
        document, dedup_index = self.load_document(target_key)
        log.info("document_loaded", existing=len(document.data))

        source_results: list[PaginationResult] = []
        new_total = 0
        duplicate_total = 0
        for source in sources:
            result = self.paginator.paginate(source, dedup_index)
            document.append(result.records)
            new_total += result.new_count
            duplicate_total += result.duplicate_count
            source_results.append(result)
            log.info(
                "source_complete",
                source=source.name,
                pages=result.pages,
                new=result.new_count,
                duplicates=result.duplicate_count,
                completed=result.completed,
            )

        saved = self.save_document(target_key, document)
        return TargetResult(
            target=target_key,
            success=saved,
            total_count=len(document.data),
            new_total=new_total,
            duplicate_total=duplicate_total,
            source_results=source_results,
        )


__all__ = ["StoreReconciler", "TargetResult"]
