"""Shared fixtures: a fake sysfs backlight device in a temporary directory."""

from pathlib import Path

import pytest


def make_device(root: Path, current: int, maximum: int) -> Path:
    device = root / "intel_backlight"
    device.mkdir()
    (device / "brightness").write_text(f"{current}\n")
    (device / "max_brightness").write_text(f"{maximum}\n")
    return device


@pytest.fixture
def device(tmp_path: Path) -> Path:
    """A device at 400 of 852, the range of a typical Intel panel."""
    return make_device(tmp_path, 400, 852)


@pytest.fixture
def brightness(device: Path) -> Path:
    return device / "brightness"


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def cli_args(device: Path, data_dir: Path, tmp_path: Path) -> list[str]:
    """Options pointing a CLI run at the fake device, with fading disabled."""
    return [
        "--device", str(device),
        "--data-dir", str(data_dir),
        "--lock-file", str(tmp_path / "brightLOCK"),
        "--fade-time", "0",
    ]
