"""In-memory index of built language packs.

Translations are mapped by project slug, version slug and WordPress locale.
The synchronizer is the only writer; query handlers read concurrently from a
thread pool. Every access goes through one lock, and locale-level maps are
copy-on-write: a write publishes a new map instead of mutating the one
readers may already hold, so a map handed out by ``list_translations`` never
changes afterwards.
"""

import threading
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .errors import MissingSlugError, MissingTranslationError, MissingVersionError
from .models import Translation

# Shared default for lookups of absent keys
_EMPTY: Mapping[str, Any] = MappingProxyType({})


class TranslationIndex:
    """Thread-safe project -> version -> locale -> Translation store."""

    def __init__(self):
        self._lock = threading.RLock()
        self._projects: dict[str, dict[str, Mapping[str, Translation]]] = {}

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def list_translations(self, slug: str, version: str) -> Mapping[str, Translation]:
        """Return all translations of a project version, keyed by locale.

        Raises:
            MissingSlugError: If the project is not indexed
            MissingVersionError: If the version is not indexed
        """
        with self._lock:
            versions = self._projects.get(slug)
            if versions is None:
                raise MissingSlugError(slug)
            locales = versions.get(version)
            if locales is None:
                raise MissingVersionError(slug, version)
            return locales

    def get_translation(self, slug: str, version: str, locale: str) -> Translation:
        """Return a single translation.

        Raises:
            MissingTranslationError: If any of the three keys is not indexed
        """
        with self._lock:
            translation = self._projects.get(slug, _EMPTY).get(version, _EMPTY).get(locale)
        if translation is None:
            raise MissingTranslationError(slug, version, locale)
        return translation

    def dump(self) -> dict[str, Any]:
        """Return a JSON-ready snapshot of the whole index."""
        with self._lock:
            snapshot = {
                slug: {version: dict(locales) for version, locales in versions.items()}
                for slug, versions in self._projects.items()
            }
        return {
            slug: {
                version: {locale: t.model_dump() for locale, t in locales.items()}
                for version, locales in versions.items()
            }
            for slug, versions in snapshot.items()
        }

    def __len__(self) -> int:
        """Number of indexed (project, version, locale) leaves."""
        with self._lock:
            return sum(
                len(locales)
                for versions in self._projects.values()
                for locales in versions.values()
            )

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def get_marker(self, slug: str, version: str, locale: str) -> Optional[str]:
        """Return the last_modified marker of an entry, or None if absent."""
        with self._lock:
            translation = self._projects.get(slug, _EMPTY).get(version, _EMPTY).get(locale)
        return translation.last_modified if translation is not None else None

    def put(self, slug: str, version: str, translation: Translation) -> None:
        """Insert or replace the entry for ``translation.language``."""
        if not translation.last_modified or not translation.package:
            raise ValueError("translation must have a last_modified marker and a package")

        with self._lock:
            versions = self._projects.setdefault(slug, {})
            locales = dict(versions.get(version, {}))
            locales[translation.language] = translation
            versions[version] = MappingProxyType(locales)
