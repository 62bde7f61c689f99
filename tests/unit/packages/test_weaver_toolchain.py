"""
Unit tests for WeaverToolchain.
"""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from aspectweave.packages import Cache, DownloadError, WeaverToolchain, WeaverToolchainError


@pytest.fixture
def cache(tmp_path, monkeypatch):
    monkeypatch.delenv("ASPECTWEAVE_CACHE_DIR", raising=False)
    return Cache(tmp_path)


class TestWeaverToolchain:
    """Test suite for WeaverToolchain."""

    def test_download_url(self, cache):
        toolchain = WeaverToolchain(cache, "1.9.22.1")

        assert toolchain.download_url == (
            "https://repo1.maven.org/maven2/org/aspectj/aspectjtools/1.9.22.1/aspectjtools-1.9.22.1.jar"
        )

    def test_explicit_jar(self, cache, tmp_path):
        jar = tmp_path / "aspectjtools.jar"
        jar.write_bytes(b"jar")
        toolchain = WeaverToolchain(cache, "1.9.22.1", jar_path=jar)

        assert toolchain.is_installed()
        assert toolchain.ensure_weaver() == jar

    def test_explicit_jar_missing(self, cache, tmp_path):
        toolchain = WeaverToolchain(cache, "1.9.22.1", jar_path=tmp_path / "missing.jar")

        assert not toolchain.is_installed()
        with pytest.raises(WeaverToolchainError, match="not found"):
            toolchain.ensure_weaver()

    def test_cached_jar_not_downloaded(self, cache):
        toolchain = WeaverToolchain(cache, "1.9.22.1")
        toolchain.cached_jar.parent.mkdir(parents=True)
        toolchain.cached_jar.write_bytes(b"jar")
        toolchain.downloader = Mock()

        assert toolchain.ensure_weaver() == toolchain.cached_jar
        toolchain.downloader.download.assert_not_called()

    def test_downloads_when_missing(self, cache):
        toolchain = WeaverToolchain(cache, "1.9.22.1", show_progress=False)
        toolchain.downloader = Mock()

        jar = toolchain.ensure_weaver()

        assert jar == toolchain.cached_jar
        toolchain.downloader.download.assert_called_once_with(
            toolchain.download_url, toolchain.cached_jar, checksum=None, show_progress=False
        )

    def test_download_failure(self, cache):
        toolchain = WeaverToolchain(cache, "1.9.22.1")
        toolchain.downloader = Mock()
        toolchain.downloader.download.side_effect = DownloadError("404")

        with pytest.raises(WeaverToolchainError, match="404"):
            toolchain.ensure_weaver()

    def test_get_command(self, cache, tmp_path):
        jar = tmp_path / "aspectjtools.jar"
        jar.write_bytes(b"jar")
        toolchain = WeaverToolchain(cache, "1.9.22.1", jar_path=jar)

        with patch("shutil.which", return_value="/usr/bin/java"):
            command = toolchain.get_command()

        assert command == ["/usr/bin/java", "-classpath", str(jar), "org.aspectj.tools.ajc.Main"]

    def test_java_missing(self, cache, tmp_path):
        jar = tmp_path / "aspectjtools.jar"
        jar.write_bytes(b"jar")
        toolchain = WeaverToolchain(cache, "1.9.22.1", java="nojava", jar_path=jar)

        with patch("shutil.which", return_value=None):
            with pytest.raises(WeaverToolchainError, match="nojava"):
                toolchain.get_command()

    def test_versions_cached_separately(self, cache):
        old = WeaverToolchain(cache, "1.9.21")
        new = WeaverToolchain(cache, "1.9.22.1")

        assert old.cached_jar != new.cached_jar
        assert isinstance(old.cached_jar, Path)
