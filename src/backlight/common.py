#
#  common.py
#  backlight
#
#  Shared helpers: logging, colours, exit codes and session lookup.
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.

import logging
import math
import os
import subprocess
import sys
from typing import Dict, Tuple

cRed = "\033[0;31m"
cGreen = "\033[0;32m"
cYellow = "\033[1;33m"
cReset = "\033[0m"

e_success = 0
e_failure = 1
e_invalid_usage = 2


def setup_logging(name: str = "backlight", level: int = logging.WARNING) -> logging.Logger:
    """Sets up and returns a standard logger that logs to stderr."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = []
    formatter = logging.Formatter("[%(levelname)s] %(message)s")
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    logger.addHandler(sh)
    return logger


def log_event(logger: logging.Logger, level_char: str, message: str) -> None:
    """Maps level characters to logging levels and logs the message."""
    level_map: Dict[str, int] = {"-": logging.ERROR, "!": logging.WARNING, "*": logging.INFO, "+": logging.INFO, "#": logging.DEBUG, "_": logging.INFO}
    level = level_map.get(level_char, logging.INFO)
    if level_char == "_":
        print(message)
        logger.info(message)
    else:
        logger.log(level, message)


def round_half_away(value: float) -> int:
    """Rounds to the nearest integer, halves away from zero (C round())."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def program_dir() -> str:
    """Directory holding the running program, used for the cache file and icons."""
    return os.path.dirname(os.path.realpath(sys.argv[0]))


def get_active_user() -> Tuple[int, str]:
    """Identifies the active user logged into the session."""
    output = subprocess.check_output(["loginctl", "list-users", "--no-legend"], text=True).strip()
    parts = output.splitlines()[0].split()
    return int(parts[0]), parts[1]


def get_user_env(uid: int) -> Dict[str, str]:
    """Returns a dictionary of environment variables for the specified user UID."""
    env = os.environ.copy()
    runtime_dir = f"/run/user/{uid}"
    if os.path.exists(runtime_dir):
        env["XDG_RUNTIME_DIR"] = runtime_dir
        if "DBUS_SESSION_BUS_ADDRESS" not in env:
            dbus_path = f"{runtime_dir}/bus"
            if os.path.exists(dbus_path):
                env["DBUS_SESSION_BUS_ADDRESS"] = f"unix:path={dbus_path}"
    return env
