# tests/conftest.py
"""Global PyTest fixtures for the test-suite.

Every test gets a SIGALRM based timeout. Cloud backends are exercised through
the in-memory fakes in ``tests.helpers.fakes``; nothing here talks to AWS or
GCP.
"""

from __future__ import annotations

import signal
from pathlib import Path
from types import FrameType
from typing import Callable, Generator

import pytest

from cloudbucket.app import App
from cloudbucket.state import DeploymentState
from tests.helpers.fakes import FakeGcsClient, FakeS3Client


DEFAULT_TEST_TIMEOUT_SECONDS = 30.0


def _build_timeout_handler(
    timeout_seconds: float,
) -> Callable[[int, FrameType | None], None]:
    """Create SIGALRM handler that fails the test when timeout is reached."""

    def _handle_timeout(signum: int, frame: FrameType | None) -> None:
        pytest.fail(
            f"Test exceeded {timeout_seconds:.0f}s timeout (includes setup/teardown)",
            pytrace=True,
        )

    return _handle_timeout


def _resolve_timeout_seconds(request: pytest.FixtureRequest) -> float:
    """Return timeout for current test (marker override allowed)."""
    marker = request.node.get_closest_marker("timeout")
    if marker is None:
        return DEFAULT_TEST_TIMEOUT_SECONDS

    raw_value = marker.kwargs.get("seconds", marker.args[0] if marker.args else None)
    if raw_value is None:
        pytest.fail("timeout marker requires seconds argument", pytrace=True)

    seconds = float(raw_value)
    if seconds <= 0:
        pytest.fail("timeout marker must be positive seconds", pytrace=True)

    return seconds


@pytest.fixture(autouse=True)
def per_test_timeout(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Fail any test that runs longer than the default timeout."""
    if not hasattr(signal, "SIGALRM") or not hasattr(signal, "setitimer"):
        yield
        return

    timeout_seconds = _resolve_timeout_seconds(request)
    handler = _build_timeout_handler(timeout_seconds)
    previous_handler = signal.getsignal(signal.SIGALRM)
    signal.signal(signal.SIGALRM, handler)
    signal.setitimer(signal.ITIMER_REAL, timeout_seconds)
    try:
        yield
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0.0)
        signal.signal(signal.SIGALRM, previous_handler)


@pytest.fixture
def fake_s3() -> FakeS3Client:
    """Empty in-memory S3 with one bucket, ``test-bucket``."""
    return FakeS3Client(buckets={"test-bucket"})


@pytest.fixture
def fake_gcs() -> FakeGcsClient:
    """Empty in-memory GCS with one bucket, ``test-bucket``."""
    return FakeGcsClient(buckets={"test-bucket"})


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / ".cloudbucket" / "state.json"


@pytest.fixture
def make_app(state_file: Path) -> Callable[[str], App]:
    """Factory for an App on a given target sharing the test's state file."""

    def _make(target_id: str) -> App:
        return App(target_id, state=DeploymentState(state_file))

    return _make
