"""Exception hierarchy for the language packs server.

Sync-side errors (network, decode, path, filesystem) are raised by the
project client and the package builder and caught by the synchronizer at the
leaf or subtree where they happen. Query-side errors are ordinary misses that
the HTTP layer turns into 404 responses.
"""


class LangPackError(Exception):
    """Base class for all errors raised by this package."""

    code = "error"


class NetworkError(LangPackError):
    """Transport-level failure reaching the GlotPress API or export endpoint."""

    code = "network_error"


class DownloadError(NetworkError):
    """A translation export could not be downloaded or is not usable."""

    code = "download_error"


class DecodeError(LangPackError):
    """A project descriptor is malformed or does not match the schema."""

    code = "decode_error"


class MalformedPathError(LangPackError):
    """A remote project path does not have the extension/version shape."""

    code = "malformed_path"


class FilesystemError(LangPackError):
    """Creating directories or writing an archive failed."""

    code = "filesystem_error"


class TranslationNotFound(LangPackError):
    """Base class for index misses."""

    code = "translation_does_not_exist"


class MissingSlugError(TranslationNotFound):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Project {slug} does not exist")


class MissingVersionError(TranslationNotFound):
    def __init__(self, slug: str, version: str):
        self.slug = slug
        self.version = version
        super().__init__(f"Translation for plugin {slug} version {version} does not exist")


class MissingTranslationError(TranslationNotFound):
    def __init__(self, slug: str, version: str, locale: str):
        self.slug = slug
        self.version = version
        self.locale = locale
        super().__init__(
            f"Translation {locale} for plugin {slug} version {version} does not exist"
        )
