"""
Unit tests for ArtifactRouter.

Tests routing of primary and referenced-only inputs into the weaver inpath
and classpath, including verbatim copies of excluded artifacts.
"""

import logging
import shutil

import pytest

from aspectweave.config import ExcludeRule
from aspectweave.transform import (
    ArtifactCopyError,
    ArtifactRouter,
    OutputProvider,
    TransformInput,
)
from aspectweave.transform.artifact_router import path_hash


@pytest.fixture
def provider(tmp_path):
    return OutputProvider(tmp_path / "out")


@pytest.fixture
def classes_dir(tmp_path):
    """Project class directory."""
    classes = tmp_path / "app" / "build" / "classes"
    (classes / "com" / "example").mkdir(parents=True)
    (classes / "com" / "example" / "Main.class").write_bytes(b"\xca\xfe\xba\xbe")
    return classes


@pytest.fixture
def guava_jar(tmp_path):
    jar = tmp_path / "gradle" / "com.google.guava" / "guava" / "31.1" / "guava-31.1.jar"
    jar.parent.mkdir(parents=True)
    jar.write_bytes(b"guava")
    return jar


@pytest.fixture
def okhttp_dir(tmp_path):
    folder = tmp_path / "gradle" / "com.squareup.okhttp3" / "okhttp" / "classes"
    (folder / "okhttp3").mkdir(parents=True)
    (folder / "okhttp3" / "Call.class").write_bytes(b"call")
    return folder


@pytest.fixture
def provided_jar(tmp_path):
    jar = tmp_path / "provided" / "annotations.jar"
    jar.parent.mkdir(parents=True)
    jar.write_bytes(b"provided")
    return jar


class TestArtifactRouter:
    """Test suite for ArtifactRouter."""

    def test_nothing_excluded(self, provider, classes_dir, guava_jar, caplog):
        """Without matching rules every primary artifact is woven."""
        caplog.set_level(logging.DEBUG)
        router = ArtifactRouter(provider, [ExcludeRule("org.unused", "nothing")])
        inputs = [TransformInput.from_paths([classes_dir, guava_jar])]

        result = router.route(inputs, [])

        assert [a.path for a in result.to_weave] == [classes_dir, guava_jar]
        assert result.classpath_only == []
        assert result.nothing_excluded
        assert "Nothing excluded." in caplog.text

    def test_excluded_jar_copied_and_on_classpath(self, provider, classes_dir, guava_jar):
        """An excluded jar is copied verbatim and moved to the classpath."""
        router = ArtifactRouter(provider, [ExcludeRule("com.google.guava", "guava")])

        result = router.route([TransformInput.from_paths([classes_dir, guava_jar])], [])

        assert [a.path for a in result.to_weave] == [classes_dir]
        assert [a.path for a in result.classpath_only] == [guava_jar]
        assert not result.nothing_excluded

        excluded = result.excluded
        assert len(excluded) == 1
        output = excluded[0].output
        assert output.name == f"guava-31.1-{path_hash(guava_jar)}.jar"
        assert output.read_bytes() == b"guava"

    def test_excluded_directory_copied_recursively(self, provider, okhttp_dir):
        """An excluded directory is copied into its output slot."""
        router = ArtifactRouter(provider, [ExcludeRule("com.squareup.okhttp3", "okhttp")])

        result = router.route([TransformInput.from_paths([okhttp_dir])], [])

        assert result.to_weave == []
        output = result.excluded[0].output
        assert output.name == f"classes-{path_hash(okhttp_dir)}"
        copied = output / "classes" / "okhttp3" / "Call.class"
        assert copied.read_bytes() == b"call"

    def test_referenced_always_classpath(self, provider, classes_dir, provided_jar):
        """Referenced-only artifacts are never woven, even with no rules."""
        router = ArtifactRouter(provider, [])

        result = router.route(
            [TransformInput.from_paths([classes_dir])],
            [TransformInput.from_paths([provided_jar])],
        )

        assert [a.path for a in result.to_weave] == [classes_dir]
        assert [a.path for a in result.classpath_only] == [provided_jar]

    def test_referenced_matching_rule_is_not_copied(self, provider, guava_jar):
        """Referenced-only artifacts are not copied even if a rule matches them."""
        router = ArtifactRouter(provider, [ExcludeRule("com.google.guava", "guava")])

        result = router.route([], [TransformInput.from_paths([guava_jar])])

        assert [a.path for a in result.classpath_only] == [guava_jar]
        assert result.classifications == []
        assert not provider.root.exists()

    def test_every_primary_artifact_routed_once(
        self, provider, classes_dir, guava_jar, okhttp_dir, provided_jar
    ):
        """Each primary artifact lands in exactly one of the two sets."""
        router = ArtifactRouter(provider, [ExcludeRule("com.google.guava", "guava")])
        primary = [classes_dir, guava_jar, okhttp_dir]

        result = router.route(
            [TransformInput.from_paths(primary)],
            [TransformInput.from_paths([provided_jar])],
        )

        woven = {a.path for a in result.to_weave}
        classpath = {a.path for a in result.classpath_only}
        for path in primary:
            assert (path in woven) != (path in classpath)
        assert provided_jar in classpath
        assert len(result.classifications) == len(primary)

    def test_directories_before_jars(self, provider, classes_dir, guava_jar, okhttp_dir):
        """Within one input bundle, directories are discovered before jars."""
        router = ArtifactRouter(provider, [])

        result = router.route([TransformInput.from_paths([guava_jar, classes_dir, okhttp_dir])], [])

        assert [a.path for a in result.to_weave] == [classes_dir, okhttp_dir, guava_jar]

    def test_copy_failure_raises(self, provider, guava_jar, monkeypatch):
        """An I/O error while copying aborts routing."""
        router = ArtifactRouter(provider, [ExcludeRule("com.google.guava", "guava")])

        def broken_copy(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(shutil, "copyfile", broken_copy)

        with pytest.raises(ArtifactCopyError, match="disk full"):
            router.route([TransformInput.from_paths([guava_jar])], [])
