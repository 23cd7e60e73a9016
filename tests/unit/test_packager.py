"""Unit tests for wc_lang_packs.packager."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from gp_fakes import MO_CONTENT, PO_CONTENT, STABLE_PATH
from wc_lang_packs.downloader import RateLimitedClient
from wc_lang_packs.errors import DownloadError, FilesystemError, MalformedPathError
from wc_lang_packs.packager import (
    ROOT_ENTRY,
    PackageBuilder,
    is_valid_mo_content,
    is_valid_po_content,
    package_name,
    package_url,
    zip_pomo_files,
)

ARCHIVE = "woocommerce-bookings-stable-es_ES.zip"


def read_archive(path: Path) -> dict[str, bytes]:
    """Return the file entries of an archive, by name."""
    with zipfile.ZipFile(path) as zf:
        return {info.filename: zf.read(info) for info in zf.infolist() if not info.is_dir()}


# ---------------------------------------------------------------------------
# Paths and names
# ---------------------------------------------------------------------------


class TestSplitPath:
    @pytest.fixture()
    def offline_builder(self, tmp_path) -> PackageBuilder:
        return PackageBuilder(RateLimitedClient(), "https://gp/projects/", tmp_path)

    def test_strips_root_project(self, offline_builder: PackageBuilder) -> None:
        assert offline_builder.split_path(STABLE_PATH) == ("woocommerce-bookings", "stable")

    def test_path_without_root_prefix(self, offline_builder: PackageBuilder) -> None:
        assert offline_builder.split_path("woocommerce-bookings/dev") == ("woocommerce-bookings", "dev")

    def test_surrounding_slashes_ignored(self, offline_builder: PackageBuilder) -> None:
        assert offline_builder.split_path(f"/{STABLE_PATH}/") == ("woocommerce-bookings", "stable")

    @pytest.mark.parametrize(
        "path",
        [
            "woocommerce/woocommerce-bookings",
            "woocommerce",
            "woocommerce/a/b/c",
            "woocommerce/a//b",
            "woocommerce/../stable",
        ],
    )
    def test_malformed_paths(self, offline_builder: PackageBuilder, path: str) -> None:
        with pytest.raises(MalformedPathError):
            offline_builder.split_path(path)

    def test_custom_root_project(self, tmp_path) -> None:
        builder = PackageBuilder(RateLimitedClient(), "https://gp/projects/", tmp_path, root_project="storefront")
        assert builder.split_path("storefront/extras/stable") == ("extras", "stable")

    def test_export_url(self, offline_builder: PackageBuilder) -> None:
        assert (
            offline_builder.export_url(STABLE_PATH, "es_ES", "mo")
            == "https://gp/projects/woocommerce/woocommerce-bookings/stable/es_ES?format=mo"
        )

    def test_names(self) -> None:
        assert package_name("woocommerce-bookings", "stable", "es_ES") == ARCHIVE
        assert (
            package_url("woocommerce-bookings", "stable", ARCHIVE)
            == f"/downloads/woocommerce-bookings/stable/{ARCHIVE}"
        )


class TestContentChecks:
    def test_po(self) -> None:
        assert is_valid_po_content(PO_CONTENT)
        assert not is_valid_po_content(b"<html>Not found</html>")

    def test_mo_little_and_big_endian(self) -> None:
        assert is_valid_mo_content(MO_CONTENT)
        assert is_valid_mo_content(b"\x95\x04\x12\xde" + b"\x00" * 24)
        assert not is_valid_mo_content(PO_CONTENT)


# ---------------------------------------------------------------------------
# zip_pomo_files
# ---------------------------------------------------------------------------


class TestZipPomoFiles:
    def test_round_trip(self, tmp_path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        (src / "ext-es_ES.po").write_bytes(PO_CONTENT)
        (src / "ext-es_ES.mo").write_bytes(MO_CONTENT)
        dst = tmp_path / "pack.zip"

        zip_pomo_files(src, dst)

        assert read_archive(dst) == {"ext-es_ES.po": PO_CONTENT, "ext-es_ES.mo": MO_CONTENT}

    def test_entries(self, tmp_path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.po").write_bytes(PO_CONTENT)
        dst = tmp_path / "pack.zip"

        zip_pomo_files(src, dst)

        with zipfile.ZipFile(dst) as zf:
            infos = zf.infolist()
        assert [i.filename for i in infos] == [ROOT_ENTRY, "a.po"]
        assert infos[0].is_dir()
        assert infos[1].compress_type == zipfile.ZIP_DEFLATED

    def test_extractall(self, tmp_path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.po").write_bytes(PO_CONTENT)
        (src / "a.mo").write_bytes(MO_CONTENT)
        dst = tmp_path / "pack.zip"
        out = tmp_path / "out"

        zip_pomo_files(src, dst)
        with zipfile.ZipFile(dst) as zf:
            zf.extractall(out)

        assert (out / "a.po").read_bytes() == PO_CONTENT
        assert (out / "a.mo").read_bytes() == MO_CONTENT

    def test_failure_keeps_previous_archive(self, tmp_path) -> None:
        dst = tmp_path / "pack.zip"
        dst.write_bytes(b"previous")

        with pytest.raises(OSError):
            zip_pomo_files(tmp_path / "missing", dst)

        assert dst.read_bytes() == b"previous"
        assert not (tmp_path / "pack.zip.part").exists()


# ---------------------------------------------------------------------------
# PackageBuilder.build
# ---------------------------------------------------------------------------


class TestBuild:
    async def test_builds_archive(self, gp_server, builder: PackageBuilder, downloads_dir: Path) -> None:
        gp_server.state.add_exports(STABLE_PATH, "es_ES")

        ref = await builder.build(STABLE_PATH, "es_ES")

        assert ref == f"/downloads/woocommerce-bookings/stable/{ARCHIVE}"
        archive = downloads_dir / "woocommerce-bookings" / "stable" / ARCHIVE
        assert read_archive(archive) == {
            "woocommerce-bookings-es_ES.po": PO_CONTENT,
            "woocommerce-bookings-es_ES.mo": MO_CONTENT,
        }
        assert sorted(gp_server.state.requests) == [
            f"/projects/{STABLE_PATH}/es_ES?format=mo",
            f"/projects/{STABLE_PATH}/es_ES?format=po",
        ]

    async def test_removes_work_dir_on_success(self, gp_server, builder: PackageBuilder, work_dir: Path) -> None:
        gp_server.state.add_exports(STABLE_PATH, "es_ES")
        await builder.build(STABLE_PATH, "es_ES")
        assert list(work_dir.iterdir()) == []

    async def test_rebuild_replaces_content_at_same_reference(
        self, gp_server, builder: PackageBuilder, downloads_dir: Path
    ) -> None:
        gp_server.state.add_exports(STABLE_PATH, "es_ES")
        first = await builder.build(STABLE_PATH, "es_ES")

        updated = PO_CONTENT + b'\nmsgid "Resource"\nmsgstr "Recurso"\n'
        gp_server.state.add_exports(STABLE_PATH, "es_ES", po=updated)
        second = await builder.build(STABLE_PATH, "es_ES")

        assert first == second
        archive = downloads_dir / "woocommerce-bookings" / "stable" / ARCHIVE
        assert read_archive(archive)["woocommerce-bookings-es_ES.po"] == updated

    async def test_missing_mo_is_download_error(
        self, gp_server, builder: PackageBuilder, downloads_dir: Path, work_dir: Path
    ) -> None:
        gp_server.state.add_exports(STABLE_PATH, "es_ES")
        del gp_server.state.exports[(f"{STABLE_PATH}/es_ES", "mo")]

        with pytest.raises(DownloadError):
            await builder.build(STABLE_PATH, "es_ES")

        assert not (downloads_dir / "woocommerce-bookings" / "stable" / ARCHIVE).exists()
        assert list(work_dir.iterdir()) == []

    async def test_missing_po_is_download_error(self, builder: PackageBuilder, work_dir: Path) -> None:
        with pytest.raises(DownloadError):
            await builder.build(STABLE_PATH, "es_ES")
        assert list(work_dir.iterdir()) == []

    async def test_invalid_po_is_download_error(self, gp_server, builder: PackageBuilder) -> None:
        gp_server.state.add_exports(STABLE_PATH, "es_ES", po=b"<html>Error</html>")
        with pytest.raises(DownloadError):
            await builder.build(STABLE_PATH, "es_ES")

    async def test_empty_mo_is_download_error(self, gp_server, builder: PackageBuilder) -> None:
        gp_server.state.add_exports(STABLE_PATH, "es_ES", mo=b"")
        with pytest.raises(DownloadError):
            await builder.build(STABLE_PATH, "es_ES")

    async def test_failed_rebuild_keeps_previous_archive(
        self, gp_server, builder: PackageBuilder, downloads_dir: Path
    ) -> None:
        gp_server.state.add_exports(STABLE_PATH, "es_ES")
        await builder.build(STABLE_PATH, "es_ES")
        gp_server.state.exports.clear()

        with pytest.raises(DownloadError):
            await builder.build(STABLE_PATH, "es_ES")

        archive = downloads_dir / "woocommerce-bookings" / "stable" / ARCHIVE
        assert read_archive(archive)["woocommerce-bookings-es_ES.po"] == PO_CONTENT

    async def test_malformed_path_makes_no_requests(self, gp_server, builder: PackageBuilder) -> None:
        with pytest.raises(MalformedPathError):
            await builder.build("woocommerce/woocommerce-bookings", "es_ES")
        assert gp_server.state.requests == []

    async def test_invalid_locale(self, gp_server, builder: PackageBuilder) -> None:
        with pytest.raises(MalformedPathError):
            await builder.build(STABLE_PATH, "../es_ES")
        assert gp_server.state.requests == []

    async def test_unwritable_downloads_dir_is_filesystem_error(
        self, gp_server, http_client, tmp_path: Path, work_dir: Path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        builder = PackageBuilder(
            http_client,
            gp_url=gp_server.url("/projects/"),
            downloads_dir=blocker / "downloads",
            temp_dir=work_dir,
        )
        gp_server.state.add_exports(STABLE_PATH, "es_ES")

        with pytest.raises(FilesystemError):
            await builder.build(STABLE_PATH, "es_ES")
        assert list(work_dir.iterdir()) == []
