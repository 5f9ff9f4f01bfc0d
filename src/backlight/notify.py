#
#  notify.py
#  backlight
#
#  Icon lookup and desktop notifications for brightness changes.
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; version 2 of the License.
#
#  See the LICENSE file for more details.

import logging
import os

from backlight.common import get_active_user, get_user_env, round_half_away

logger = logging.getLogger(__name__)

icon_names = ["off", "low", "medium", "high", "full"]
app_name = "backlight"


def icon_name(brightness: int, max_brightness: int) -> str:
    """Buckets the brightness into one of five icon names."""
    if max_brightness <= 0:
        return icon_names[0]
    index = round_half_away(4.4 * brightness / max_brightness)
    return icon_names[min(max(index, 0), len(icon_names) - 1)]


def icon_path(directory: str, brightness: int, max_brightness: int) -> str:
    return os.path.join(directory, f"notification-display-brightness-{icon_name(brightness, max_brightness)}.png")


def _session_bus():
    import gi
    gi.require_version("Gio", "2.0")
    from gi.repository import Gio  # type: ignore

    # Running as root (setuid or sudo): talk to the logged in user's bus
    if os.geteuid() == 0:
        uid, user = get_active_user()
        address = get_user_env(uid).get("DBUS_SESSION_BUS_ADDRESS")
        if address:
            logger.debug(f"Using session bus of {user} at {address}")
            flags = Gio.DBusConnectionFlags.AUTHENTICATION_CLIENT | Gio.DBusConnectionFlags.MESSAGE_BUS_CONNECTION
            return Gio.DBusConnection.new_for_address_sync(address, flags, None, None)
    return Gio.bus_get_sync(Gio.BusType.SESSION, None)


def _notify_dbus(summary: str, icon: str, percent: int, timeout_ms: int) -> int:
    """Calls org.freedesktop.Notifications.Notify and returns the notification id."""
    import gi
    gi.require_version("GLib", "2.0")
    gi.require_version("Gio", "2.0")
    from gi.repository import Gio, GLib  # type: ignore

    hints = {
        "transient": GLib.Variant("b", True),
        "value": GLib.Variant("i", percent),
        "synchronous": GLib.Variant("s", "brightness"),
        "x-canonical-private-synchronous": GLib.Variant("s", "brightness"),
    }
    params = GLib.Variant("(susssasa{sv}i)", (app_name, 0, icon, summary, "", [], hints, timeout_ms))
    bus = _session_bus()
    reply = bus.call_sync(
        "org.freedesktop.Notifications",
        "/org/freedesktop/Notifications",
        "org.freedesktop.Notifications",
        "Notify",
        params,
        GLib.VariantType.new("(u)"),
        Gio.DBusCallFlags.NONE,
        -1,
        None,
    )
    return reply.unpack()[0]


def send_notification(description: str, icon: str, brightness: int, max_brightness: int, timeout_ms: int = 500) -> bool:
    """
    Shows a transient "Brightness ..." notification with a level bar.
    Returns False on any failure; a missing notification never fails the run.
    """
    percent = round_half_away(brightness * 100 / max_brightness) if max_brightness else 0
    summary = f"Brightness {description}".rstrip()
    try:
        notification_id = _notify_dbus(summary, icon, percent, timeout_ms)
    except Exception as err:
        logger.warning(f"Notification failed: {err}")
        return False
    logger.debug(f"Sent notification {notification_id}: {summary}")
    return True
