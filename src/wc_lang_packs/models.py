"""Data models for GlotPress project descriptors and cached translations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .locales import get_locale_prop

# Format GlotPress uses for last_modified timestamps
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class StringMarker:
    """A last_modified value sent as a timestamp string."""

    value: str


@dataclass(frozen=True)
class BooleanMarker:
    """A last_modified value sent as a boolean (or not sent at all).

    GlotPress sends ``false`` for translation sets that have never been
    modified. Such sets have no usable timestamp.
    """

    flag: bool


StalenessMarker = Union[StringMarker, BooleanMarker]


def decode_marker(raw: Optional[Union[str, bool]]) -> StalenessMarker:
    """Decode a raw last_modified value into a tagged marker."""
    if isinstance(raw, str) and raw:
        return StringMarker(raw)
    return BooleanMarker(bool(raw))


def normalize_marker(marker: StalenessMarker, now: Optional[datetime] = None) -> str:
    """Turn a marker into the comparable string stored in the index.

    Boolean markers are mapped to the current time, so the index only holds
    string markers. The synchronizer stamps a boolean-marked set once, when
    it is first built, and keeps that entry while the set stays boolean.
    """
    if isinstance(marker, StringMarker):
        return marker.value
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


class TranslationSet(BaseModel):
    """Translation set of a GlotPress project (``/api/projects/{path}``)."""

    name: str = ""
    locale: str
    wp_locale: str = ""
    last_modified: Optional[Union[str, bool]] = None

    @property
    def key(self) -> str:
        """Locale code the index is keyed by."""
        return self.wp_locale or self.locale

    @property
    def marker(self) -> StalenessMarker:
        return decode_marker(self.last_modified)

    def marker_value(self, now: Optional[datetime] = None) -> str:
        return normalize_marker(self.marker, now)


class SubProject(BaseModel):
    """Sub-project of a GlotPress project."""

    slug: str
    path: str
    active: bool = True


class ProjectDescriptor(BaseModel):
    """A GlotPress project as returned by ``/api/projects/{path}``."""

    translation_sets: list[TranslationSet] = Field(default_factory=list)
    sub_projects: list[SubProject] = Field(default_factory=list)


class Translation(BaseModel):
    """Cached language pack for one (project, version, locale).

    Mirrors an item of https://api.wordpress.org/translations/plugins/1.0/
    """

    model_config = ConfigDict(frozen=True)

    language: str
    last_modified: str
    english_name: str = ""
    native_name: str = ""
    package: str  # Download URL of the language pack

    @classmethod
    def for_locale(cls, locale: str, last_modified: str, package: str) -> "Translation":
        """Create a translation with names filled in from the locale table."""
        return cls(
            language=locale,
            last_modified=last_modified,
            english_name=get_locale_prop(locale, "EnglishName"),
            native_name=get_locale_prop(locale, "NativeName"),
            package=package,
        )
