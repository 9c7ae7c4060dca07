"""Gemfile update pipeline: parse, resolve and rebuild each line."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from .config import DEFAULT_MAX_CONCURRENCY, DEFAULT_STALENESS_DAYS
from .exceptions import RegistryError
from .models import (
    GemChange,
    ManifestLine,
    ReleaseRecord,
    Resolution,
    Skipped,
    SkippedGem,
    UpdateReport,
)
from .parse_gemfile import parse_gemfile
from .rebuild import build_gem_line
from .resolve_ruby import resolve

logger = logging.getLogger(__name__)

FetchHistory = Callable[[str], Awaitable[list[ReleaseRecord]]]


class GemfileUpdater:
    """Drives parsing, resolution and rebuilding over a whole Gemfile."""

    def __init__(
        self,
        fetch_history: FetchHistory,
        threshold_days: int = DEFAULT_STALENESS_DAYS,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        now: datetime | None = None,
    ):
        """Initialize the updater.

        Args:
            fetch_history: Coroutine returning a gem's release history,
                raising RegistryError on failure
            threshold_days: Minimum age in days before a new major is adopted
            max_concurrency: Number of history fetches allowed in flight
            now: Fixed reference time for the staleness check
        """
        self.fetch_history = fetch_history
        self.threshold_days = threshold_days
        self.max_concurrency = max_concurrency
        self.now = now

    async def _process_line(
        self, line: ManifestLine, semaphore: asyncio.Semaphore
    ) -> GemChange | SkippedGem:
        """Resolve and rebuild one declaration, logging its progress as it goes.

        The semaphore is held for the whole line, so with the default
        concurrency of 1 progress output follows file order.
        """
        declaration = line.declaration
        name = declaration.name
        async with semaphore:
            if declaration.has_alt_source:
                logger.info("Skipping: %s (non-RubyGems source)", name)
                return SkippedGem(name, line.line_number, "non-RubyGems source")

            logger.info("Processing: %s", name)
            try:
                history = await self.fetch_history(name)
            except RegistryError as e:
                resolution: Resolution = Skipped(str(e))
            else:
                resolution = resolve(
                    declaration, history, threshold_days=self.threshold_days, now=self.now
                )

            if isinstance(resolution, Skipped):
                logger.info("  Skipped (%s)", resolution.reason)
                return SkippedGem(name, line.line_number, resolution.reason)

            new_line = build_gem_line(line.raw, name, resolution.version)
            current = declaration.current_version or declaration.raw_constraint or "unpinned"
            logger.info("  %s -> ~> %s", current, resolution.version)
            return GemChange(
                name=name,
                line_number=line.line_number,
                current_version=declaration.current_version,
                target_version=resolution.version,
                old_line=line.raw,
                new_line=new_line,
            )

    async def run(self, lines: list[ManifestLine], filename: str = "Gemfile") -> UpdateReport:
        """Process classified lines and assemble the updated file.

        Args:
            lines: Lines as produced by parse_gemfile
            filename: Name used in the report

        Returns:
            Report whose `lines` has one entry per input line, in order
        """
        output = [line.raw for line in lines]
        report = UpdateReport(filename=filename, lines=output)

        pending = [(index, line) for index, line in enumerate(lines) if line.is_declaration]
        semaphore = asyncio.Semaphore(self.max_concurrency)
        outcomes = await asyncio.gather(
            *(self._process_line(line, semaphore) for _, line in pending)
        )

        # Results land in the slot of their source line, whatever the fetch order
        for (index, _), outcome in zip(pending, outcomes):
            if isinstance(outcome, SkippedGem):
                report.skipped.append(outcome)
                continue
            output[index] = outcome.new_line
            report.changes.append(outcome)

        return report

    async def update(self, content: str, filename: str = "Gemfile") -> UpdateReport:
        """Parse Gemfile content and run the pipeline over it."""
        return await self.run(parse_gemfile(content), filename=filename)
