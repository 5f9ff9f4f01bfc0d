#
#  lock.py
#  backlight
#
#  Serializes concurrent runs that would otherwise interleave writes to the
#  same brightness file.
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.

import errno
import fcntl
import logging
import os
from typing import Optional

from backlight.errors import LockError

logger = logging.getLogger(__name__)


class ExclusiveLock:
    """
    Advisory POSIX write lock on a well-known file, held for a whole run.
    acquire() blocks until the lock is free; use as a context manager so
    the lock is released on every exit path.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._fd: Optional[int] = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        if self._fd is not None:
            return
        try:
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o666)
        except OSError as err:
            raise LockError(self.path, err.strerror or str(err)) from err

        try:
            fcntl.lockf(fd, fcntl.LOCK_EX)
        except OSError as err:
            os.close(fd)
            if err.errno == errno.EDEADLK:
                raise LockError(self.path, "deadlock detected") from err
            raise LockError(self.path, err.strerror or str(err)) from err
        self._fd = fd
        logger.debug(f"Acquired lock {self.path}")

    def release(self) -> None:
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        try:
            fcntl.lockf(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)
        logger.debug(f"Released lock {self.path}")

    def __enter__(self) -> "ExclusiveLock":
        self.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self.release()
