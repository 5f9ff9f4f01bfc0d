#
#  config.py
#  backlight
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.

import os
from dataclasses import dataclass, field
from typing import List, Optional

from backlight.common import program_dir

# --- Configuration ---

# Fraction of the change applied per fade step; number of steps = 1/fade_step.
# 0 = one native unit per step (smoothest), 0.5 = 2 steps.
fade_step = 0.1

# Fade duration in ms. The real transition always takes a little longer
# because of I/O. 0 disables fading, valid range is 1-999.
fade_time = 170

# Floor for inc/dec/set, in native units. Only toggle may go below it to 0.
# 0 = no floor (the screen can turn off with dec and set).
lower_limit = 1

lock_path = "/tmp/brightLOCK"
cache_name = "prev_brightness"
notify_timeout_ms = 500

device_paths: List[str] = [
    "/sys/class/backlight/intel_backlight",
    "/sys/class/backlight/acpi_video0",
]


@dataclass(frozen=True)
class Settings:
    """Configuration for one run, built once from the constants and CLI overrides."""

    device_path: Optional[str] = None
    fade_step: float = fade_step
    fade_time: int = fade_time
    lower_limit: int = lower_limit
    lock_path: str = lock_path
    data_dir: str = field(default_factory=program_dir)
    notify_timeout_ms: int = notify_timeout_ms

    @property
    def cache_path(self) -> str:
        return os.path.join(self.data_dir, cache_name)
