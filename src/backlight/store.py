#
#  store.py
#  backlight
#
#  Reads and writes the integer-valued sysfs backlight files.
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.

import logging
import os
from typing import List, Optional

from backlight.errors import ReadError, WriteError

logger = logging.getLogger(__name__)

backlight_class_dir = "/sys/class/backlight"


def read_value(path: str) -> int:
    """
    Reads the first line of a file and interprets it as a decimal integer.
    Raises ReadError when the file cannot be opened or parsed.
    """
    try:
        with open(path, "r") as f:
            line = f.readline()
    except OSError as err:
        raise ReadError(path, err.strerror or str(err)) from err

    try:
        return int(line.strip())
    except ValueError as err:
        raise ReadError(path, f"not an integer: {line.strip()!r}") from err


def write_value(path: str, value: int) -> int:
    """
    Truncates the file and writes the value as a decimal line.
    Returns the number of characters written; raises WriteError on failure.
    """
    try:
        # close() flushes, sysfs sees the value before we return
        with open(path, "w") as f:
            chars = f.write(f"{value}\n")
    except OSError as err:
        raise WriteError(path, err.strerror or str(err)) from err
    logger.debug(f"Wrote {value} to {path}")
    return chars


def check_writable(path: str) -> bool:
    """Writes the current value back unchanged to probe for write permission."""
    try:
        write_value(path, read_value(path))
    except (ReadError, WriteError) as err:
        logger.debug(f"Write probe failed: {err}")
        return False
    return True


def find_device_path(paths: List[str]) -> Optional[str]:
    """Finds the first existing directory from a list of paths, then any backlight device."""
    for path in paths:
        if os.path.isdir(path):
            return path
    if os.path.isdir(backlight_class_dir):
        for name in sorted(os.listdir(backlight_class_dir)):
            candidate = os.path.join(backlight_class_dir, name)
            if os.path.isfile(os.path.join(candidate, "max_brightness")):
                return candidate
    return None


def brightness_file(device_path: str) -> str:
    return os.path.join(device_path, "brightness")


def max_brightness_file(device_path: str) -> str:
    return os.path.join(device_path, "max_brightness")


def calculate_percentage(current: int, max_val: int) -> float:
    """Calculates the percentage of brightness."""
    if max_val == 0:
        return 0.0
    return current * 100 / max_val
