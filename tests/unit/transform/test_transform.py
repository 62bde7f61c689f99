"""
Unit tests for AspectJTransform.

Tests the complete weave orchestration with a fake weaver:
- Cleaning and disabled runs
- Routing and invocation assembly
- Diagnostic outcome
"""

import logging
import os
from typing import List

import pytest

from aspectweave.config import ExcludeRule, WeaveConfig
from aspectweave.log_utils import QUIET
from aspectweave.transform import (
    SCOPE_FULL_PROJECT,
    AspectJTransform,
    Diagnostic,
    InvocationSpec,
    OutputProvider,
    Scope,
    Severity,
    TransformError,
    TransformInput,
    WeaveAbortError,
    WeaveExecutor,
)


class FakeExecutor(WeaveExecutor):
    """Records invocations and returns canned diagnostics."""

    version = "1.9.22.1"

    def __init__(self, diagnostics: List[Diagnostic] = None):
        self.diagnostics = diagnostics or []
        self.calls: List[InvocationSpec] = []

    def run(self, spec: InvocationSpec) -> List[Diagnostic]:
        self.calls.append(spec)
        return list(self.diagnostics)


@pytest.fixture
def provider(tmp_path):
    return OutputProvider(tmp_path / "out")


@pytest.fixture
def classes_dir(tmp_path):
    classes = tmp_path / "app" / "classes"
    classes.mkdir(parents=True)
    (classes / "Main.class").write_bytes(b"main")
    return classes


@pytest.fixture
def guava_jar(tmp_path):
    jar = tmp_path / "deps" / "com.google.guava" / "guava" / "guava.jar"
    jar.parent.mkdir(parents=True)
    jar.write_bytes(b"guava")
    return jar


@pytest.fixture
def provided_jar(tmp_path):
    jar = tmp_path / "provided" / "provided.jar"
    jar.parent.mkdir(parents=True)
    jar.write_bytes(b"provided")
    return jar


@pytest.fixture
def config():
    return WeaveConfig(
        exclude_rules=(ExcludeRule("com.google.guava", "guava"),),
        bootclasspath=("/sdk/platforms/android-34/android.jar",),
    )


class TestAspectJTransform:
    """Test suite for AspectJTransform."""

    def test_metadata(self, config, provider):
        transform = AspectJTransform(config, provider, FakeExecutor())

        assert transform.name == "AspectJ"
        assert transform.scopes == SCOPE_FULL_PROJECT
        assert transform.referenced_scopes == frozenset({Scope.PROVIDED_ONLY})
        assert transform.is_incremental is False

    def test_disabled_has_no_scopes(self, provider):
        transform = AspectJTransform(WeaveConfig(enabled=False), provider, FakeExecutor())

        assert transform.scopes == frozenset()

    def test_disabled_cleans_and_skips(self, provider, classes_dir, caplog):
        caplog.set_level(logging.DEBUG)
        stale = provider.root / "stale.txt"
        stale.parent.mkdir(parents=True)
        stale.write_text("old")
        executor = FakeExecutor()

        result = AspectJTransform(WeaveConfig(enabled=False), provider, executor).transform(
            [TransformInput.from_paths([classes_dir])]
        )

        assert result.skipped
        assert not stale.exists()
        assert executor.calls == []
        assert (QUIET, "AspectJ weaving is disabled.") in [
            (r.levelno, r.getMessage()) for r in caplog.records
        ]

    def test_successful_weave(self, config, provider, classes_dir, guava_jar, provided_jar):
        executor = FakeExecutor([Diagnostic(Severity.WEAVEINFO, "Join point ...")])

        result = AspectJTransform(config, provider, executor).transform(
            [TransformInput.from_paths([classes_dir, guava_jar])],
            [TransformInput.from_paths([provided_jar])],
        )

        assert result.success
        assert len(executor.calls) == 1
        spec = executor.calls[0]
        assert spec.inpath.split(os.pathsep) == [str(classes_dir)]
        assert spec.classpath.split(os.pathsep) == [str(provided_jar), str(guava_jar)]
        assert spec.bootclasspath == "/sdk/platforms/android-34/android.jar"
        assert spec.output_dir.name == "main"
        assert len(result.routing.excluded) == 1

    def test_error_diagnostic_aborts(self, config, provider, classes_dir):
        cause = ValueError("bad bytecode")
        executor = FakeExecutor([
            Diagnostic(Severity.ERROR, "can't weave", cause=cause),
            Diagnostic(Severity.WARNING, "later"),
        ])

        with pytest.raises(WeaveAbortError) as exc_info:
            AspectJTransform(config, provider, executor).transform(
                [TransformInput.from_paths([classes_dir])]
            )

        assert str(exc_info.value) == "can't weave"
        assert exc_info.value.cause is cause
        assert isinstance(exc_info.value, TransformError)

    def test_empty_primary_inputs(self, config, provider, provided_jar):
        """Only referenced inputs: success, empty woven output, weaver not run."""
        executor = FakeExecutor()

        result = AspectJTransform(config, provider, executor).transform(
            [], [TransformInput.from_paths([provided_jar])]
        )

        assert result.success
        assert executor.calls == []
        assert [a.path for a in result.routing.classpath_only] == [provided_jar]
        assert result.invocation.output_dir.is_dir()
        assert list(result.invocation.output_dir.iterdir()) == []

    def test_runs_are_deterministic(self, config, provider, classes_dir, guava_jar, provided_jar):
        executor = FakeExecutor()
        transform = AspectJTransform(config, provider, executor)

        for _ in range(2):
            transform.transform(
                [TransformInput.from_paths([classes_dir, guava_jar])],
                [TransformInput.from_paths([provided_jar])],
            )

        first, second = executor.calls
        assert first.inpath == second.inpath
        assert first.classpath == second.classpath

    def test_runtime_library_from_java_classpath(self, provider, classes_dir):
        rt = os.sep.join(["", "jdk", "jre", "lib", "rt.jar"])
        executor = FakeExecutor()
        config = WeaveConfig(javart_needed=True)

        AspectJTransform(config, provider, executor).transform(
            [TransformInput.from_paths([classes_dir])],
            java_classpath=["/other.jar", rt],
        )

        assert executor.calls[0].classpath.split(os.pathsep)[-1] == rt

    def test_incremental_request_still_full(self, config, provider, classes_dir):
        executor = FakeExecutor()

        result = AspectJTransform(config, provider, executor).transform(
            [TransformInput.from_paths([classes_dir])], is_incremental=True
        )

        assert result.success
        assert len(executor.calls) == 1

    def test_missing_android_sdk_is_transform_error(self, provider, classes_dir, monkeypatch):
        monkeypatch.delenv("ANDROID_HOME", raising=False)
        monkeypatch.delenv("ANDROID_SDK_ROOT", raising=False)
        config = WeaveConfig(compile_sdk="android-34")

        with pytest.raises(TransformError, match="Android SDK"):
            AspectJTransform(config, provider, FakeExecutor()).transform(
                [TransformInput.from_paths([classes_dir])]
            )
