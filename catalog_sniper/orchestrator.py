"""Run orchestrator wiring together fetching, reconciliation and persistence."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable

import structlog

from .config import ApiSourceConfig, ConfigRepository, GlobalConfig
from .engine import Fetcher, Paginator, StoreReconciler, TargetResult
from .infra import BaseBlobStore, FileBlobStore
from .logging_conf import configure_logging


def group_by_target(sources: Iterable[ApiSourceConfig]) -> dict[str, list[ApiSourceConfig]]:
    """Group sources by output file, keeping first-appearance order."""

    grouped: dict[str, list[ApiSourceConfig]] = {}
    for source in sources:
        grouped.setdefault(source.output_file, []).append(source)
    return grouped


@dataclass(slots=True)
class RunReport:
    """Per-target results of one full run."""

    results: dict[str, TargetResult] = field(default_factory=dict)
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return all(result.success for result in self.results.values())

    @property
    def failed_targets(self) -> list[str]:
        return [name for name, result in self.results.items() if not result.success]


class Orchestrator:
    """Central coordinator running every target sequentially."""

    def __init__(
        self,
        config_repository: ConfigRepository,
        store: BaseBlobStore | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.config_repository = config_repository
        self.global_config: GlobalConfig = config_repository.load_global_config()
        self.store = store or FileBlobStore(config_repository.resolved_outputs_dir())
        self._fetcher = fetcher
        self.logger = configure_logging().bind(component="orchestrator")

    def _build_fetcher(self) -> Fetcher:
        return Fetcher(
            self.global_config.fetch,
            logger=structlog.get_logger("catalog_sniper.fetcher"),
        )

    def run(
        self,
        sources: Iterable[ApiSourceConfig] | None = None,
        targets: Iterable[str] | None = None,
    ) -> RunReport:
        selected = list(sources) if sources is not None else self.global_config.enabled_sources()
        grouped = group_by_target(selected)
        if targets:
            wanted = set(targets)
            unknown = wanted.difference(grouped)
            if unknown:
                raise KeyError(f"Unknown target(s): {', '.join(sorted(unknown))}")
            grouped = {key: value for key, value in grouped.items() if key in wanted}

        started = time.monotonic()
        self.logger.info("run_started", targets=list(grouped), sources=len(selected))
        report = RunReport()
        owns_fetcher = self._fetcher is None
        fetcher = self._fetcher or self._build_fetcher()
        try:
            paginator = Paginator(
                fetcher,
                self.global_config.fetch,
                logger=structlog.get_logger("catalog_sniper.paginator"),
            )
            reconciler = StoreReconciler(
                self.store,
                paginator,
                logger=structlog.get_logger("catalog_sniper.reconciler"),
            )
            for target, target_sources in grouped.items():
                self.logger.info("target_started", target=target, sources=[s.name for s in target_sources])
                result = reconciler.reconcile(target, target_sources)
                report.results[target] = result
                self.logger.info(
                    "target_complete",
                    target=target,
                    success=result.success,
                    total=result.total_count,
                    new=result.new_total,
                    duplicates=result.duplicate_total,
                )
        finally:
            if owns_fetcher:
                fetcher.close()
        report.duration = time.monotonic() - started
        self.logger.info("run_complete", ok=report.ok, duration=round(report.duration, 2))
        return report


__all__ = ["Orchestrator", "RunReport", "group_by_target"]
