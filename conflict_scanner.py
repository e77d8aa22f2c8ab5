#!/usr/bin/env python3
"""
Conflict Scanner
Runs corpus loading and conflict detection off the caller's event loop,
keeping only the result of the most recent request
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from data_models import Recipe, ConflictReport
from conflict_detector import detect

@dataclass
class ScanResult:
    generation: int
    corpus: List[Recipe]
    report: ConflictReport

class ConflictScanner:
    """Last-writer-wins rescans of a corpus source

    Every rescan() takes a new generation number. A scan that finishes after
    a newer one was requested is discarded and returns None.
    """

    def __init__(self, load_corpus: Callable[[], List[Recipe]]):
        self.load_corpus = load_corpus
        self.generation = 0
        self.latest: Optional[ScanResult] = None
        self.logger = logging.getLogger(__name__)

    def _load_and_detect(self):
        corpus = self.load_corpus()
        return corpus, detect(corpus)

    async def rescan(self) -> Optional[ScanResult]:
        self.generation += 1
        generation = self.generation
        self.logger.debug(f"Starting conflict scan #{generation}")

        corpus, report = await asyncio.to_thread(self._load_and_detect)

        if generation != self.generation:
            self.logger.debug(f"Discarding stale conflict scan #{generation} (latest is #{self.generation})")
            return None
        self.latest = ScanResult(generation, corpus, report)
        self.logger.info(f"Conflict scan #{generation}: {len(report.errors())} errors, "
                         f"{len(report.warnings())} warnings")
        return self.latest

    def scan(self, corpus: List[Recipe]) -> ConflictReport:
        """Synchronous detection for callers that already hold a corpus"""
        return detect(corpus)
