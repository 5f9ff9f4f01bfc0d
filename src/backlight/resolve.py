#
#  resolve.py
#  backlight
#
#  Turns the inc/dec/set/toggle options into one clamped change.
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.

import logging
import math
from dataclasses import dataclass
from typing import Optional

from backlight import store
from backlight.common import round_half_away
from backlight.errors import ParseError, ReadError, WriteError

logger = logging.getLogger(__name__)


def parse_int_argument(option: str, text: Optional[str]) -> Optional[int]:
    """Converts a string of decimal digits to an int. Anything else raises ParseError."""
    if text is None:
        return None
    stripped = text.strip()
    if not stripped:
        raise ParseError(option, text, "no digits were found")
    if not stripped.isdigit() or not stripped.isascii():
        raise ParseError(option, text, "non digit in decimal value")
    return int(stripped)


@dataclass(frozen=True)
class Request:
    """What the user asked for, before looking at the device."""

    inc: Optional[int] = None
    dec: Optional[int] = None
    set_to: Optional[int] = None
    toggle: bool = False
    percent: bool = False

    @property
    def directive_count(self) -> int:
        return sum(v is not None for v in (self.inc, self.dec, self.set_to)) + int(self.toggle)


@dataclass(frozen=True)
class Resolution:
    current: int
    delta: int
    action: str = ""
    toggle_off: bool = False
    shown: int = 0
    percent: bool = False
    max_brightness: int = 0

    @property
    def target(self) -> int:
        return self.current + self.delta

    @property
    def description(self) -> str:
        """Human readable summary, e.g. 'Incremented by 85 (10%)'."""
        if not self.action:
            return ""
        text = f"{self.action}{self.shown}"
        if self.percent and self.max_brightness:
            text += f" ({math.ceil(self.shown * 100 / self.max_brightness)}%)"
        return text


def to_native(value: int, max_brightness: int, percent: bool) -> int:
    """Interprets value as native units, or as a percentage of max_brightness."""
    if not percent:
        return value
    return round_half_away(value * max_brightness / 100)


def resolve(request: Request, current: int, max_brightness: int, lower_limit: int, cache_path: str) -> Resolution:
    """
    Computes the single (current, delta) pair for a request. The resulting
    target is clamped to [lower_limit, max_brightness], except that toggling
    off may reach 0. Toggling off stores the current value in cache_path,
    toggling on restores it.
    """
    change = 0
    action = ""
    toggle_off = False

    if request.toggle:
        if current == 0:
            try:
                change = store.read_value(cache_path)
            except ReadError as err:
                logger.debug(f"No previous brightness: {err}")
                change = 1
            if change < 1:
                change = 1
            action = "Toggled on, set to "
        else:
            try:
                store.write_value(cache_path, current)
            except WriteError as err:
                logger.warning(f"Couldn't store current brightness, aborting toggle ({err})")
            else:
                change = -current
                toggle_off = True
                action = "Toggled off, saved previous brightness as "
    elif request.inc is not None and request.inc > 0:
        change = to_native(request.inc, max_brightness, request.percent)
        action = "Incremented by "
    elif request.dec is not None and request.dec > 0:
        change = -to_native(request.dec, max_brightness, request.percent)
        action = "Decremented by "
    elif request.set_to is not None:
        change = to_native(request.set_to, max_brightness, request.percent) - current
        action = "Set to "

    target = current + change
    floor = max(0, lower_limit)
    if target < floor:
        target = 0 if toggle_off else floor
    elif target > max_brightness:
        target = max_brightness
    delta = target - current

    shown = target if request.set_to is not None else abs(delta)
    return Resolution(current, delta, action, toggle_off, shown, request.percent, max_brightness)
