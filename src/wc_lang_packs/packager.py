"""Language pack builder.

A language pack is a zip archive holding the ``.po`` and ``.mo`` exports of
one extension version in one locale. Exports are downloaded into a scoped
temporary directory that is removed whatever the outcome. The archive is
moved into the downloads directory only once it is complete.
"""

import asyncio
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Optional

import aiofiles

from .downloader.client import RateLimitedClient
from .downloader.gp_client import join_url
from .errors import DownloadError, FilesystemError, MalformedPathError, NetworkError
from .utils.logging import get_logger

logger = get_logger(__name__)

ARCHIVE_EXT = "zip"
DOWNLOADS_PREFIX = "/downloads/"

# Name of the archive entry for the directory holding the exports
ROOT_ENTRY = "/"

# Magic numbers of compiled gettext catalogs, little and big endian
MO_MAGIC = (b"\xde\x12\x04\x95", b"\x95\x04\x12\xde")


def is_valid_po_content(content: bytes) -> bool:
    """Check if content appears to be a PO file."""
    return b"msgid" in content and b"msgstr" in content


def is_valid_mo_content(content: bytes) -> bool:
    """Check if content starts with the gettext MO magic number."""
    return content[:4] in MO_MAGIC


def package_name(extension: str, version: str, locale: str) -> str:
    """Get the archive file name of a language pack."""
    return f"{extension}-{version}-{locale}.{ARCHIVE_EXT}"


def package_url(extension: str, version: str, lp_name: str) -> str:
    """Get the public download reference of a language pack."""
    return f"{DOWNLOADS_PREFIX}{extension}/{version}/{lp_name}"


def zip_pomo_files(src_dir: Path, zip_dst: Path) -> None:
    """Zip the files in src_dir into zip_dst.

    The archive holds a root directory entry followed by the files of
    src_dir in name order, deflated. It is written next to zip_dst and
    renamed over it, so zip_dst is either the previous archive or the
    complete new one.

    Raises:
        OSError: If reading the sources or writing the archive fails
    """
    part = zip_dst.with_name(zip_dst.name + ".part")
    try:
        with zipfile.ZipFile(part, "w") as arch:
            root = zipfile.ZipInfo(ROOT_ENTRY)
            root.external_attr = (0o40755 << 16) | 0x10
            arch.writestr(root, b"")

            for path in sorted(src_dir.iterdir()):
                if path.is_file():
                    arch.write(path, arcname=path.name, compress_type=zipfile.ZIP_DEFLATED)
        os.replace(part, zip_dst)
    except Exception:
        part.unlink(missing_ok=True)
        raise


class PackageBuilder:
    """Builds language pack archives from GlotPress exports."""

    def __init__(
        self,
        client: RateLimitedClient,
        gp_url: str,
        downloads_dir: str | Path,
        root_project: str = "woocommerce",
        temp_dir: Optional[str | Path] = None,
    ):
        """Initialize the builder.

        Args:
            client: Rate-limited HTTP client used for export downloads
            gp_url: Root of the GlotPress projects (export) URLs
            downloads_dir: Directory the archives are written to
            root_project: Slug of the root project, stripped from paths
            temp_dir: Parent of the scoped working directories
                (default: the system temporary directory)
        """
        self.client = client
        self.gp_url = gp_url
        self.downloads_dir = Path(downloads_dir)
        self.root_project = root_project.strip("/")
        self.temp_dir = temp_dir

    def split_path(self, path: str) -> tuple[str, str]:
        """Split a remote version path into extension and version slugs.

        Args:
            path: Remote path, e.g. 'woocommerce/woocommerce-bookings/stable'

        Returns:
            Tuple of (extension slug, version slug)

        Raises:
            MalformedPathError: If the path does not name exactly an
                extension and a version below the root project
        """
        relative = path.strip("/")
        prefix = self.root_project + "/"
        if relative.startswith(prefix):
            relative = relative[len(prefix):]

        parts = relative.split("/")
        if len(parts) != 2 or any(p in ("", ".", "..") for p in parts):
            raise MalformedPathError(
                f"Expected '{prefix}<extension>/<version>', got {path!r}"
            )
        return parts[0], parts[1]

    def export_url(self, path: str, locale: str, fmt: str) -> str:
        """Get the export URL of a translation file."""
        return join_url(self.gp_url, f"{path.strip('/')}/{locale}") + f"?format={fmt}"

    async def build(self, path: str, locale: str) -> str:
        """Build the language pack of a version path in a locale.

        Args:
            path: Remote version path
            locale: WordPress locale code

        Returns:
            Download reference of the archive

        Raises:
            MalformedPathError: If the path has the wrong shape
            DownloadError: If an export cannot be downloaded or is invalid
            FilesystemError: If the archive cannot be written
        """
        extension, version = self.split_path(path)
        if not locale or "/" in locale or locale in (".", ".."):
            raise MalformedPathError(f"Invalid locale {locale!r} for {path}")

        lp_name = package_name(extension, version, locale)
        logger.info(f"Building language pack {lp_name}")

        try:
            workdir = tempfile.TemporaryDirectory(
                prefix=f"{extension}-{version}-{locale}-", dir=self.temp_dir
            )
        except OSError as e:
            raise FilesystemError(f"Error creating directory for POMO files: {e}") from e

        with workdir as pomo_dir:
            pomo_dir = Path(pomo_dir)

            await self._download(
                self.export_url(path, locale, "po"),
                pomo_dir / f"{extension}-{locale}.po",
                is_valid_po_content,
            )
            await self._download(
                self.export_url(path, locale, "mo"),
                pomo_dir / f"{extension}-{locale}.mo",
                is_valid_mo_content,
            )

            lp_dir = self.downloads_dir / extension / version
            try:
                lp_dir.mkdir(parents=True, exist_ok=True)
                await asyncio.to_thread(zip_pomo_files, pomo_dir, lp_dir / lp_name)
            except OSError as e:
                raise FilesystemError(f"Error writing language pack {lp_name}: {e}") from e

        return package_url(extension, version, lp_name)

    async def _download(
        self,
        url: str,
        dst: Path,
        is_valid: Callable[[bytes], bool],
    ) -> None:
        """Download a translation file verbatim into dst."""
        try:
            content = await self.client.get(url)
        except NetworkError as e:
            raise DownloadError(f"Error downloading {dst.suffix} file: {e}") from e

        if not content or not is_valid(content):
            raise DownloadError(f"Invalid {dst.suffix} content from {url}")

        try:
            async with aiofiles.open(dst, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise FilesystemError(f"Error saving {dst.name}: {e}") from e

        logger.debug(f"Downloaded: {dst.name} ({len(content)} bytes)")
