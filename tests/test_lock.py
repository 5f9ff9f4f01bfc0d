"""Tests for the process-wide exclusive lock."""

import errno
import fcntl
import os
import subprocess
import sys
from pathlib import Path

import pytest

from backlight import lock as lock_module
from backlight.errors import LockError
from backlight.lock import ExclusiveLock

TRY_LOCK = """
import errno, fcntl, os, sys
fd = os.open(sys.argv[1], os.O_RDWR)
try:
    fcntl.lockf(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
except OSError as err:
    sys.exit(3 if err.errno in (errno.EAGAIN, errno.EACCES) else 4)
"""


def lock_from_other_process(path: str) -> int:
    """Tries a non-blocking lock on path from a child process and returns its exit status."""
    return subprocess.run([sys.executable, "-c", TRY_LOCK, path], check=False).returncode


class TestExclusiveLock:
    def test_context_manager_acquires_and_releases(self, tmp_path: Path) -> None:
        path = tmp_path / "brightLOCK"
        with ExclusiveLock(str(path)) as held:
            assert held.held
            assert path.exists()
        assert not held.held

    def test_released_on_error(self, tmp_path: Path) -> None:
        lock = ExclusiveLock(str(tmp_path / "brightLOCK"))
        with pytest.raises(RuntimeError):
            with lock:
                raise RuntimeError("boom")
        assert not lock.held

    def test_acquire_twice_is_harmless(self, tmp_path: Path) -> None:
        lock = ExclusiveLock(str(tmp_path / "brightLOCK"))
        lock.acquire()
        lock.acquire()
        lock.release()
        lock.release()
        assert not lock.held

    def test_reacquire_after_release(self, tmp_path: Path) -> None:
        path = str(tmp_path / "brightLOCK")
        with ExclusiveLock(path):
            pass
        with ExclusiveLock(path) as again:
            assert again.held

    def test_unopenable_path(self, tmp_path: Path) -> None:
        with pytest.raises(LockError) as exc_info:
            ExclusiveLock(str(tmp_path / "missing" / "brightLOCK")).acquire()
        assert "missing" in exc_info.value.path

    def test_deadlock_is_reported(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        closed = []
        real_close = os.close

        def deadlock(fd: int, operation: int) -> None:
            raise OSError(errno.EDEADLK, os.strerror(errno.EDEADLK))

        def tracking_close(fd: int) -> None:
            closed.append(fd)
            real_close(fd)

        monkeypatch.setattr(fcntl, "lockf", deadlock)
        monkeypatch.setattr(lock_module.os, "close", tracking_close)
        lock = ExclusiveLock(str(tmp_path / "brightLOCK"))
        with pytest.raises(LockError, match="deadlock"):
            lock.acquire()
        assert len(closed) == 1
        assert not lock.held

    def test_interrupted_wait_fails(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def interrupted(fd: int, operation: int) -> None:
            raise OSError(errno.EINTR, os.strerror(errno.EINTR))

        monkeypatch.setattr(fcntl, "lockf", interrupted)
        with pytest.raises(LockError):
            ExclusiveLock(str(tmp_path / "brightLOCK")).acquire()

    def test_other_process_waits_for_release(self, tmp_path: Path) -> None:
        path = str(tmp_path / "brightLOCK")
        lock = ExclusiveLock(path)
        with lock:
            assert lock_from_other_process(path) == 3
        assert lock_from_other_process(path) == 0
