"""GlotPress synchronizer.

One sync cycle walks the GlotPress hierarchy: the root project, each of its
sub-projects (extensions, e.g. woocommerce-bookings), and each sub-project of
an extension (versions, e.g. stable). For every translation set of a version
the cached last_modified marker is compared to the remote one, and a language
pack is built only when the entry is missing or the markers differ.

Failures stay local: a failed build leaves the previous entry in place, and a
project that cannot be fetched is skipped until the next cycle.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .errors import LangPackError
from .index import TranslationIndex
from .models import (
    BooleanMarker,
    ProjectDescriptor,
    SubProject,
    Translation,
    TranslationSet,
)
from .utils.logging import get_logger

logger = get_logger(__name__)


class ProjectSource(Protocol):
    async def fetch_project(self, path: str) -> ProjectDescriptor: ...


class PackageSource(Protocol):
    async def build(self, path: str, locale: str) -> str: ...


@dataclass
class SyncStats:
    """Result of a sync cycle."""

    built: int = 0
    unchanged: int = 0
    failed: int = 0
    skipped_subtrees: int = 0
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def total_leaves(self) -> int:
        return self.built + self.unchanged + self.failed


class Synchronizer:
    """Keeps the translation index in line with GlotPress."""

    def __init__(
        self,
        projects: ProjectSource,
        packages: PackageSource,
        index: TranslationIndex,
        root_project: str = "woocommerce",
        skip_inactive: bool = False,
    ):
        """Initialize the synchronizer.

        Args:
            projects: Source of GlotPress project descriptors
            packages: Language pack builder
            index: Index this synchronizer writes to
            root_project: Path of the root project
            skip_inactive: Skip sub-projects GlotPress marks as inactive
        """
        self.projects = projects
        self.packages = packages
        self.index = index
        self.root_project = root_project
        self.skip_inactive = skip_inactive

    async def run_cycle(self) -> SyncStats:
        """Run one full sync cycle. Never raises for remote or build errors."""
        start_time = time.time()
        stats = SyncStats()

        try:
            root = await self.projects.fetch_project(self.root_project)
        except LangPackError as e:
            logger.error(f"Error fetching root project {self.root_project}: {e}")
            stats.skipped_subtrees += 1
            stats.errors.append(str(e))
        else:
            for extension in self._sub_projects(root):
                await self._sync_extension(extension, stats)

        stats.duration_seconds = time.time() - start_time
        logger.info(
            f"Sync cycle complete: "
            f"{stats.built} built, "
            f"{stats.unchanged} unchanged, "
            f"{stats.failed} failed, "
            f"{stats.skipped_subtrees} projects skipped, "
            f"{stats.duration_seconds:.1f}s"
        )
        return stats

    def _sub_projects(self, project: ProjectDescriptor) -> list[SubProject]:
        if not self.skip_inactive:
            return project.sub_projects
        return [p for p in project.sub_projects if p.active]

    async def _sync_extension(self, extension: SubProject, stats: SyncStats) -> None:
        try:
            descriptor = await self.projects.fetch_project(extension.path)
        except LangPackError as e:
            logger.warning(f"Error in fetching {extension.path}, skipping: {e}")
            stats.skipped_subtrees += 1
            stats.errors.append(str(e))
            return

        # Sub-projects of an extension are its versions
        for version in self._sub_projects(descriptor):
            try:
                version_descriptor = await self.projects.fetch_project(version.path)
            except LangPackError as e:
                logger.warning(f"Error in fetching {version.path}, skipping: {e}")
                stats.skipped_subtrees += 1
                stats.errors.append(str(e))
                continue

            for ts in version_descriptor.translation_sets:
                await self._sync_leaf(extension, version, ts, stats)

    async def _sync_leaf(
        self,
        extension: SubProject,
        version: SubProject,
        ts: TranslationSet,
        stats: SyncStats,
    ) -> None:
        locale = ts.key
        current = self.index.get_marker(extension.slug, version.slug, locale)

        # A boolean marker carries no timestamp to compare; once built, the
        # entry keeps the marker it was stamped with
        if current is not None and isinstance(ts.marker, BooleanMarker):
            stats.unchanged += 1
            return

        marker = ts.marker_value()
        if current is not None and current == marker:
            stats.unchanged += 1
            return

        if current is None:
            logger.info(f"New translation {extension.slug} {version.slug} {locale}")
        else:
            logger.info(
                f"Translation {extension.slug} {version.slug} {locale} changed "
                f"({current} -> {marker})"
            )

        try:
            package = await self.packages.build(version.path, locale)
        except LangPackError as e:
            logger.warning(f"Error building {extension.slug} {version.slug} {locale}: {e}")
            stats.failed += 1
            stats.errors.append(str(e))
            return

        self.index.put(
            extension.slug,
            version.slug,
            Translation.for_locale(locale, marker, package),
        )
        stats.built += 1


class PollScheduler:
    """Runs sync cycles back to back with a fixed pause after each one.

    A single task runs the cycles, so two cycles never overlap; a slow cycle
    delays the next one.
    """

    def __init__(self, synchronizer: Synchronizer, interval: float):
        self.synchronizer = synchronizer
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """Run cycles until cancelled (or until max_cycles have run)."""
        logger.info(f"Start polling each {self.interval}s")
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            try:
                await self.synchronizer.run_cycle()
            except Exception:
                logger.exception("Error during poll")
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            logger.info(f"Sleep for {self.interval}s")
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        """Start polling in a background task on the running loop."""
        if self.running:
            raise RuntimeError("Poll scheduler is already running")
        self._task = asyncio.create_task(self.run_forever(), name="glotpress-poll")
        return self._task

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
