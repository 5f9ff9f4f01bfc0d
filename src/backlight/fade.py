#
#  fade.py
#  backlight
#
#  Moves the brightness file from one value to another, either with a single
#  write or as a sequence of intermediate writes paced over a short duration.
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List

from backlight import store
from backlight.common import round_half_away
from backlight.errors import TimerError, WriteError

logger = logging.getLogger(__name__)

fade_time_range = (1, 999)
fade_step_range = (0.0, 0.5)


class FadeStatus(enum.Enum):
    OK = "ok"
    NOOP = "noop"
    OUT_OF_RANGE = "out of range"
    WRITE_ERROR = "write error"
    TIMER_ERROR = "timer error"


@dataclass(frozen=True)
class FadePolicy:
    """How a change is animated, and the floor it may not cross."""

    step_fraction: float = 0.1
    duration_ms: int = 170
    lower_limit: int = 1

    @property
    def enabled(self) -> bool:
        """Fading only happens when both duration and step fraction are in range."""
        return (fade_time_range[0] <= self.duration_ms <= fade_time_range[1]
                and fade_step_range[0] <= self.step_fraction <= fade_step_range[1])


@dataclass(frozen=True)
class Transition:
    start: int
    delta: int
    step_fraction: float
    duration_ms: int

    @property
    def target(self) -> int:
        return self.start + self.delta

    @property
    def step(self) -> int:
        """
        Native units added per iteration. Falls back to one unit in the
        direction of travel when the fraction is 0 or rounds down to nothing.
        """
        direction = -1 if self.delta < 0 else 1
        if self.step_fraction > 0:
            step = round_half_away(self.delta * self.step_fraction)
            if step != 0:
                return step
        return direction

    @property
    def step_delay(self) -> float:
        """Seconds between writes, so that all steps together take about duration_ms."""
        if not self.delta:
            return 0.0
        steps = self.delta / self.step
        return self.duration_ms / 1000 / steps

    def values(self) -> List[int]:
        """The values written in order; the last is always the exact target."""
        out: List[int] = []
        if not self.delta:
            return out
        current = self.start
        target = self.target
        step = self.step
        while True:
            current += step
            if (step > 0 and current >= target) or (step < 0 and current <= target):
                out.append(target)
                return out
            out.append(current)


@dataclass
class FadeOutcome:
    status: FadeStatus
    target: int
    last_written: int | None = None
    writes: List[int] = field(default_factory=list)
    chars: int = 0

    @property
    def ok(self) -> bool:
        return self.status not in (FadeStatus.WRITE_ERROR, FadeStatus.TIMER_ERROR)

    @property
    def code(self) -> int:
        """Characters written by the final write, 0 for no-op, -1 write error, -2 timer error."""
        if self.status is FadeStatus.WRITE_ERROR:
            return -1
        if self.status is FadeStatus.TIMER_ERROR:
            return -2
        if self.status is FadeStatus.OK:
            return self.chars
        return 0


def pace(seconds: float, sleep: Callable[[float], None] = time.sleep, clock: Callable[[], float] = time.monotonic) -> None:
    """
    Sleeps for the given time. An interrupted sleep resumes for whatever is
    left of the original deadline; any other failure raises TimerError.
    """
    deadline = clock() + seconds
    remaining = seconds
    while remaining > 0:
        try:
            sleep(remaining)
            return
        except InterruptedError:
            remaining = deadline - clock()
            logger.debug(f"Sleep interrupted, resuming for {max(remaining, 0):.4f}s")
        except (OSError, ValueError, OverflowError) as err:
            raise TimerError(f"Sleep of {remaining:.4f}s failed: {err}") from err


def fade_to(path: str, current: int, delta: int, policy: FadePolicy, max_brightness: int, allow_off: bool = False,
            sleep: Callable[[float], None] = time.sleep, clock: Callable[[], float] = time.monotonic) -> FadeOutcome:
    """
    Transitions the brightness file at path from current to current + delta.

    The target must already lie between the floor (policy.lower_limit, or 0
    when allow_off is set) and max_brightness; otherwise nothing is written.
    Write failures abort at once and leave the file at the last value that
    was written successfully.
    """
    target = current + delta
    if not delta:
        return FadeOutcome(FadeStatus.NOOP, target)

    floor = 0 if allow_off else max(0, policy.lower_limit)
    if target < floor or target > max_brightness:
        logger.debug(f"Target {target} outside [{floor}, {max_brightness}], nothing to do")
        return FadeOutcome(FadeStatus.OUT_OF_RANGE, target)

    outcome = FadeOutcome(FadeStatus.OK, target)

    if not policy.enabled:
        logger.debug(f"Fading disabled (time={policy.duration_ms}, step={policy.step_fraction}), setting {target}")
        try:
            outcome.chars = store.write_value(path, target)
        except WriteError as err:
            logger.error(str(err))
            outcome.status = FadeStatus.WRITE_ERROR
            return outcome
        outcome.writes.append(target)
        outcome.last_written = target
        return outcome

    transition = Transition(current, delta, policy.step_fraction, policy.duration_ms)
    delay = transition.step_delay
    logger.debug(f"Fading {current} -> {target}, step {transition.step}, delay {delay:.4f}s")

    for value in transition.values():
        try:
            chars = store.write_value(path, value)
        except WriteError as err:
            logger.error(f"Fade aborted at {value}: {err}")
            outcome.status = FadeStatus.WRITE_ERROR
            return outcome
        outcome.writes.append(value)
        outcome.last_written = value
        if value == target:
            outcome.chars = chars
            break
        try:
            pace(delay, sleep=sleep, clock=clock)
        except TimerError as err:
            logger.error(f"Fade aborted at {value}: {err}")
            outcome.status = FadeStatus.TIMER_ERROR
            return outcome
    return outcome
