#
#  errors.py
#  backlight
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.


class BacklightError(Exception):
    """Base class for every error raised by the backlight package."""


class ReadError(BacklightError):
    """A brightness file could not be opened or did not hold an integer."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path
        self.reason = reason


class WriteError(BacklightError):
    """A brightness file could not be opened for writing or rejected the value."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not write {path}: {reason}")
        self.path = path
        self.reason = reason


class TimerError(BacklightError):
    """Sleeping between fade steps failed for a reason other than a signal."""


class LockError(BacklightError):
    """The process-wide lock could not be taken."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed lock on {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseError(BacklightError):
    """An option argument is not a non-negative decimal integer."""

    def __init__(self, option: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid value {value!r} for {option}: {reason}")
        self.option = option
        self.value = value
        self.reason = reason
