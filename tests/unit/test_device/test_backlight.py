"""Tests for the sysfs backlight writer (fake sysfs tree under tmp_path)."""

from __future__ import annotations

from pathlib import Path

import pytest

from levelctl.device.backlight import BacklightWriteError, BacklightWriter, discover_backlights


def make_backlight(root: Path, name: str, max_brightness: str = "1000") -> Path:
    device = root / name
    device.mkdir(parents=True)
    (device / "max_brightness").write_text(f"{max_brightness}\n")
    (device / "brightness").write_text("0\n")
    return device


class TestDiscover:
    def test_missing_root(self, tmp_path: Path) -> None:
        assert discover_backlights(tmp_path / "nope") == []

    def test_finds_sorted_devices(self, tmp_path: Path) -> None:
        make_backlight(tmp_path, "intel_backlight")
        make_backlight(tmp_path, "acpi_video0")
        (tmp_path / "not_a_backlight").mkdir()
        assert discover_backlights(tmp_path) == ["acpi_video0", "intel_backlight"]


class TestBacklightWriter:
    @pytest.mark.asyncio
    async def test_writes_scaled_value(self, tmp_path: Path) -> None:
        device = make_backlight(tmp_path, "intel_backlight", "19200")
        writer = BacklightWriter("intel_backlight", tmp_path)
        value = await writer.write_percentage(50)
        assert value == 9600
        assert (device / "brightness").read_text() == "9600\n"

    @pytest.mark.asyncio
    async def test_caches_max_brightness(self, tmp_path: Path) -> None:
        device = make_backlight(tmp_path, "acpi_video0", "10")
        writer = BacklightWriter("acpi_video0", tmp_path)
        assert await writer.read_max_brightness() == 10
        (device / "max_brightness").write_text("20\n")
        assert await writer.read_max_brightness() == 10

    @pytest.mark.asyncio
    async def test_missing_device_raises(self, tmp_path: Path) -> None:
        writer = BacklightWriter("ghost", tmp_path)
        with pytest.raises(BacklightWriteError, match="Cannot read"):
            await writer.write_percentage(50)

    @pytest.mark.asyncio
    async def test_bad_max_brightness(self, tmp_path: Path) -> None:
        make_backlight(tmp_path, "broken", "0")
        writer = BacklightWriter("broken", tmp_path)
        with pytest.raises(BacklightWriteError, match="max_brightness"):
            await writer.write_percentage(50)

    def test_scale_rounds(self) -> None:
        writer = BacklightWriter("x")
        assert writer.scale(30, 7) == 2
        assert writer.scale(100, 7) == 7
        assert writer.scale(0, 7) == 0
