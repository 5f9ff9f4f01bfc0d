#!/usr/bin/env python3
#
#  cli.py
#  backlight
#
#  Command line entry point: backlight [OPTION...]
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.

import argparse
import logging
import math
import os
import sys
from typing import List, Optional

from backlight import __version__, config, store
from backlight.common import cGreen, cRed, cReset, cYellow, e_failure, e_invalid_usage, e_success, log_event, program_dir, setup_logging
from backlight.config import Settings
from backlight.errors import LockError, ParseError, ReadError
from backlight.fade import FadePolicy, fade_to
from backlight.lock import ExclusiveLock
from backlight.notify import icon_path, send_notification
from backlight.resolve import Request, Resolution, parse_int_argument, resolve

logger = logging.getLogger("backlight")


def _log(level_char: str, msg: str) -> None:
    log_event(logger, level_char, msg)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="backlight", description="backlight -- Read, set, increment, or decrement the backlight on sysfs based displays")
    parser.add_argument("-v", "--verbose", action="store_true", help="Produce verbose output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Produce no output")
    parser.add_argument("-n", "--notify", action="store_true", help="Send notification")
    parser.add_argument("-I", "--iconpath", action="store_true", help="Output ONLY path to icon")
    parser.add_argument("-p", "--percent", action="store_true", help="Interpret integer as percentage")
    parser.add_argument("-t", "--toggle", action="store_true", help="Toggle backlight")
    parser.add_argument("-i", "--inc", metavar="INT", help="Increment")
    parser.add_argument("-d", "--dec", metavar="INT", help="Decrement")
    parser.add_argument("-s", "--set", metavar="INT", help="Set")
    parser.add_argument("-V", "--version", action="version", version=f"backlight {__version__}")

    tuning = parser.add_argument_group("tuning")
    tuning.add_argument("--device", help="Backlight device directory (default: first found under /sys/class/backlight)")
    tuning.add_argument("--fade-time", type=int, default=config.fade_time, help="Fade duration in ms, 1-999 (0 disables fading)")
    tuning.add_argument("--fade-step", type=float, default=config.fade_step, help="Fraction of the change per fade step, 0-0.5")
    tuning.add_argument("--lower-limit", type=int, default=config.lower_limit, help="Lowest brightness reachable without --toggle")
    tuning.add_argument("--data-dir", help="Directory holding prev_brightness and the icons (default: program directory)")
    tuning.add_argument("--lock-file", default=config.lock_path, help="Lock file serializing concurrent runs")
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        device_path=args.device,
        fade_step=args.fade_step,
        fade_time=args.fade_time,
        lower_limit=args.lower_limit,
        lock_path=args.lock_file,
        data_dir=args.data_dir or program_dir(),
    )


def _percent_of(value: int, max_brightness: int) -> int:
    return math.ceil(store.calculate_percentage(value, max_brightness))


def _current_line(value: int, max_brightness: int, percent: bool) -> str:
    if percent:
        return f"Current brightness = {value} ({_percent_of(value, max_brightness)}%)"
    return f"Current brightness = {value}"


def _limit_message(request: Request, max_brightness: int, lower_limit: int, with_value: bool) -> Optional[str]:
    """Explains why a requested change did nothing."""
    wants_up = (request.inc is not None and request.inc > 0) or (request.set_to is not None and (request.set_to > max_brightness or (request.percent and request.set_to > 100)))
    if wants_up:
        return f"Reached maximum brightness: {max_brightness}" if with_value else "Reached maximum brightness"
    wants_down = (request.dec is not None and request.dec > 0) or (request.set_to is not None and request.set_to <= lower_limit)
    if wants_down:
        return "Reached minimum brightness, -t to turn off" if lower_limit > 0 else "Reached minimum brightness"
    return None


def _report(args: argparse.Namespace, request: Request, resolution: Resolution, max_brightness: int, chars: int, lower_limit: int) -> None:
    current = resolution.target if chars > 0 else resolution.current

    if args.verbose:
        print(f"Max brightness = {max_brightness}")
        print(_current_line(current, max_brightness, request.percent))
        if chars == 0:
            print(_limit_message(request, max_brightness, lower_limit, with_value=False) or "No change in brightness")
        elif chars == -1:
            exe = os.path.realpath(sys.argv[0])
            print(f"{cRed}Cannot write to brightness file{cReset}")
            print(f"Make sure {exe} is owned by root.")
            print(f'If so, try "sudo chmod u+s {exe}"')
        elif chars == -2:
            print(f"{cRed}Sleep error{cReset}")
        else:
            print(f"Characters written = {chars}")
            print(f"{cGreen}{resolution.description}{cReset}")
    elif chars < 0:
        print(f"{cRed}Unable to set brightness, -v for more info. Exiting...{cReset}")
    elif chars > 0:
        print(f"Max brightness = {max_brightness}")
        print(_current_line(current, max_brightness, request.percent))
        print(f"{cGreen}{resolution.description}{cReset}")
    elif request.directive_count:
        message = _limit_message(request, max_brightness, lower_limit, with_value=True)
        if message:
            print(f"{cYellow}{message}{cReset}")


def main(argv: Optional[List[str]] = None) -> int:
    """Reads the backlight, applies the requested change and reports what happened."""
    args = build_parser().parse_args(argv)

    if args.iconpath:
        args.quiet = True
    level = logging.DEBUG if args.verbose else logging.ERROR if args.quiet else logging.WARNING
    setup_logging("backlight", level)

    try:
        request = Request(
            inc=parse_int_argument("--inc", args.inc),
            dec=parse_int_argument("--dec", args.dec),
            set_to=parse_int_argument("--set", args.set),
            toggle=args.toggle,
            percent=args.percent,
        )
        if args.lower_limit < 0:
            raise ParseError("--lower-limit", str(args.lower_limit), "must not be negative")
    except ParseError as err:
        print(f"{cRed}{err}{cReset}")
        return e_invalid_usage

    passive = sum([args.verbose, args.notify, args.percent, args.iconpath, args.quiet])
    if args.verbose:
        print(f"Arguments parsed = {passive} Passive, {request.directive_count} NonPassive")

    if request.directive_count > 1 or (args.verbose and (args.iconpath or args.quiet)):
        if args.verbose and args.iconpath:
            print("Verbose and Iconpath conflict.")
        elif args.verbose and args.quiet:
            print("Verbose and Quiet conflict.")
        if request.directive_count > 1:
            print("Toggle, Increment, Decrement and Set are mutually exclusive options.")
        print("Exiting...")
        return e_invalid_usage

    settings = _settings_from_args(args)
    device_path = settings.device_path or store.find_device_path(config.device_paths)
    if not device_path:
        print(f"{cRed}Error: No supported display backlight found.{cReset}")
        return e_failure
    brightness_path = store.brightness_file(device_path)

    try:
        with ExclusiveLock(settings.lock_path):
            max_brightness = store.read_value(store.max_brightness_file(device_path))
            current = store.read_value(brightness_path)
            if current < 0 or current > max_brightness:
                raise ReadError(brightness_path, f"{current} is outside 0-{max_brightness}")

            if not request.directive_count and not passive:
                print(f"Max brightness = {max_brightness}")
                print(f"Current brightness = {current}")
                return e_success

            can_write = store.check_writable(brightness_path)
            if not can_write and not args.verbose and not args.iconpath:
                print(f"{cRed}Unable to set brightness, check permissions. -v for more info. Exiting...{cReset}")
                return e_failure

            resolution = resolve(request, current, max_brightness, settings.lower_limit, settings.cache_path)
            _log("#", f"Resolved {resolution.current} -> {resolution.target} ({resolution.description or 'no directive'})")

            if args.verbose or args.notify or args.iconpath:
                icon = icon_path(settings.data_dir, resolution.target, max_brightness)
                if args.iconpath:
                    print(icon)
                if can_write and resolution.delta and args.notify:
                    send_notification(resolution.description, icon, resolution.target, max_brightness, settings.notify_timeout_ms)
                if args.verbose:
                    print(f"Path = {settings.data_dir}")
                    print(f"Icon path = {icon}")

            chars = 0 if can_write else -1
            if can_write and (resolution.delta or args.verbose):
                policy = FadePolicy(settings.fade_step, settings.fade_time, settings.lower_limit)
                outcome = fade_to(brightness_path, resolution.current, resolution.delta, policy, max_brightness, allow_off=resolution.toggle_off)
                chars = outcome.code
    except LockError as err:
        _log("-", str(err))
        print(f"{cRed}Failed lock{cReset}")
        return e_failure
    except ReadError as err:
        _log("-", str(err))
        return e_failure

    if not args.quiet:
        _report(args, request, resolution, max_brightness, chars, settings.lower_limit)
    return e_failure if chars < 0 else e_success


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
