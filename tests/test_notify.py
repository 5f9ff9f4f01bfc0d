"""Tests for icon lookup and the notification boundary."""

from unittest.mock import MagicMock

import pytest

from backlight import notify


class TestIconName:
    @pytest.mark.parametrize(
        ("brightness", "name"),
        [(0, "off"), (96, "off"), (97, "low"), (290, "low"), (291, "medium"), (484, "medium"), (485, "high"), (677, "high"), (678, "full"), (852, "full")],
    )
    def test_buckets(self, brightness: int, name: str) -> None:
        assert notify.icon_name(brightness, 852) == name

    def test_zero_max(self) -> None:
        assert notify.icon_name(10, 0) == "off"

    def test_icon_path(self) -> None:
        path = notify.icon_path("/usr/local/bin", 852, 852)
        assert path == "/usr/local/bin/notification-display-brightness-full.png"


class TestSendNotification:
    def test_success(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = MagicMock(return_value=7)
        monkeypatch.setattr(notify, "_notify_dbus", fake)
        assert notify.send_notification("Incremented by 85 (10%)", "/icon.png", 426, 852, timeout_ms=500) is True
        fake.assert_called_once_with("Brightness Incremented by 85 (10%)", "/icon.png", 50, 500)

    def test_failure_is_swallowed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(notify, "_notify_dbus", MagicMock(side_effect=RuntimeError("no session bus")))
        assert notify.send_notification("Set to 1", "/icon.png", 1, 852) is False

    def test_missing_bindings_are_swallowed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(notify, "_notify_dbus", MagicMock(side_effect=ImportError("No module named 'gi'")))
        assert notify.send_notification("Set to 1", "/icon.png", 1, 852) is False


class TestNotifyDbus:
    def test_hints_and_arguments(self, monkeypatch: pytest.MonkeyPatch) -> None:
        GLib = pytest.importorskip("gi.repository.GLib")
        bus = MagicMock()
        bus.call_sync.return_value = GLib.Variant("(u)", (7,))
        monkeypatch.setattr(notify, "_session_bus", lambda: bus)

        assert notify._notify_dbus("Brightness Set to 426", "/icon.png", 50, 500) == 7

        params = bus.call_sync.call_args.args[4].unpack()
        assert params[2:4] == ("/icon.png", "Brightness Set to 426")
        hints = params[6]
        assert hints["transient"] is True
        assert hints["value"] == 50
        assert hints["synchronous"] == "brightness"
        assert params[7] == 500
