"""Tests for config file and environment loading."""

import json
from pathlib import Path

import pytest

from pwclock_gui.core.config import (
    BUFFER_SIZES,
    SAMPLE_RATES,
    Config,
    ConfigError,
    config_from_dict,
    load_config,
)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(tmp_path / "nope.json")

        assert cfg == Config()
        assert cfg.sample_rates == SAMPLE_RATES
        assert cfg.buffer_sizes == BUFFER_SIZES
        assert cfg.default_sample_rate == 48000
        assert cfg.default_buffer_size == 1024

    def test_default_location_uses_xdg_config_home(self, isolated_env: Path) -> None:
        p = isolated_env / "config" / "pwclock-gui" / "config.json"
        p.parent.mkdir(parents=True)
        p.write_text(json.dumps({"refresh_delay_ms": 2500}), encoding="utf-8")

        assert load_config().refresh_delay_ms == 2500

    def test_env_config_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        p = tmp_path / "custom.json"
        p.write_text(json.dumps({"notifications": False}), encoding="utf-8")
        monkeypatch.setenv("PWCLOCK_CONFIG", str(p))

        assert load_config().notifications is False

    def test_file_values(self, tmp_path: Path) -> None:
        p = tmp_path / "config.json"
        p.write_text(
            json.dumps({
                "sample_rates": [48000, 96000, 192000],
                "buffer_sizes": [64, 128],
                "restart_units": ["pipewire"],
                "unknown_key": "ignored",
            }),
            encoding="utf-8",
        )

        cfg = load_config(p)

        assert cfg.sample_rates == (48000, 96000, 192000)
        assert cfg.buffer_sizes == (64, 128)
        assert cfg.restart_units == ("pipewire",)

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"metadata_tool": "/from/file"}), encoding="utf-8")
        monkeypatch.setenv("PWCLOCK_PW_METADATA", "/from/env")
        monkeypatch.setenv("PWCLOCK_SYSTEMCTL", "/bin/systemctl")

        cfg = load_config(p)

        assert cfg.metadata_tool == "/from/env"
        assert cfg.systemctl_tool == "/bin/systemctl"

    def test_invalid_json(self, tmp_path: Path) -> None:
        p = tmp_path / "config.json"
        p.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError, match="invalid JSON"):
            load_config(p)

    def test_not_an_object(self, tmp_path: Path) -> None:
        p = tmp_path / "config.json"
        p.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(p)


class TestConfigFromDict:
    """Value validation in config_from_dict()."""

    @pytest.mark.parametrize(
        "data",
        [
            {"sample_rates": []},
            {"sample_rates": [48000, "96000"]},
            {"buffer_sizes": [0]},
            {"default_sample_rate": -1},
            {"default_buffer_size": True},
            {"refresh_delay_ms": -5},
            {"notifications": "yes"},
            {"restart_units": "pipewire"},
            {"metadata_tool": ""},
        ],
    )
    def test_rejects_bad_values(self, data: dict) -> None:
        key = next(iter(data))
        with pytest.raises(ConfigError, match=key):
            config_from_dict(data)

    def test_overlays_base(self) -> None:
        base = Config(refresh_delay_ms=0)
        cfg = config_from_dict({"status_unit": "pipewire.service"}, base)

        assert cfg.refresh_delay_ms == 0
        assert cfg.status_unit == "pipewire.service"
