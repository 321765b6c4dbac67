"""Admission pipeline.

The pipeline enforces a strict order:
1) Content shape filter (per item, synchronous)
2) Duplicate collapsing (once per batch)
3) Timestamp / rate-limit filter (per item, needs the store)

The store-backed check runs last so rejected items never cost a query.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

from core.config import PrefilterConfig
from core.content import filter_by_content
from core.dedup import filter_dupes
from core.diagnostics import DiagnosticSink
from core.models import Searchee
from core.ports import IndexerRegistryPort, TimestampStorePort
from core.timestamps import Clock, filter_timestamps, now_ms

LOGGER = logging.getLogger(__name__)


class AdmissionPipeline:
    """Decides which searchees of a discovery pass get searched."""

    def __init__(
        self,
        config: PrefilterConfig,
        indexers: IndexerRegistryPort,
        store: TimestampStorePort,
        diagnostics: DiagnosticSink,
        clock: Clock = now_ms,
    ) -> None:
        self._config = config
        self._indexers = indexers
        self._store = store
        self._diagnostics = diagnostics
        self._clock = clock

    async def admit(self, searchees: Iterable[Searchee]) -> List[Searchee]:
        """Return the eligible subset, in discovery order.

        Any store or indexer failure aborts the pass instead of silently
        admitting or dropping items.
        """

        batch = list(searchees)
        shaped = [s for s in batch if filter_by_content(s, self._config, self._diagnostics)]
        unique = filter_dupes(shaped, self._diagnostics)

        # Each check is independent and read-only, so they may overlap.
        verdicts = await asyncio.gather(
            *(
                filter_timestamps(
                    searchee,
                    self._config,
                    self._indexers,
                    self._store,
                    self._diagnostics,
                    self._clock,
                )
                for searchee in unique
            )
        )
        admitted = [searchee for searchee, ok in zip(unique, verdicts) if ok]
        LOGGER.info("Admitted %s of %s searchees", len(admitted), len(batch))
        return admitted
