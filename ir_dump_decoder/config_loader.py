"""YAML loader for protocol timing and plot settings."""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

import yaml

from ir_dump_decoder.decoding.protocol import ProtocolTiming
from ir_dump_decoder.utils.timeline import PlotSettings

logger = logging.getLogger(__name__)

_BAND_KEYS = ("leader_pulse_units", "leader_pause_units", "gap_pause_units")


def _is_int(value: Any) -> bool:
    # YAML booleans load as bool, a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigLoader:
    """Loads calibration constants from YAML files.

    Example file::

        protocol:
          unit_us: 550
          long_multiplier: 3
          leader_pause_units: [15, 20]
        plot:
          min_span_us: 300000

    Missing keys keep their defaults.
    """

    @staticmethod
    def load(config_path: str | Path) -> dict[str, Any]:
        """Load a configuration file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            yaml.YAMLError: If YAML is malformed.
            ValueError: If the top level is not a mapping.
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        logger.debug("Loaded config sections %s from %s", sorted(config), path)
        return config

    @staticmethod
    def _section(config: dict[str, Any], name: str, target: type) -> dict[str, Any]:
        section = config.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"'{name}' section must be a mapping")

        known = {f.name for f in fields(target)}
        unknown = set(section) - known
        if unknown:
            raise ValueError(f"Unknown '{name}' keys: {', '.join(sorted(unknown))}")

        for key, value in section.items():
            if key in _BAND_KEYS:
                if (
                    not isinstance(value, (list, tuple))
                    or len(value) != 2
                    or not all(_is_int(v) for v in value)
                ):
                    raise ValueError(f"'{key}' must be a [low, high] pair of integers")
            elif not _is_int(value):
                raise ValueError(f"'{key}' must be an integer, got {value!r}")
        return section

    @staticmethod
    def get_protocol_timing(config: dict[str, Any]) -> ProtocolTiming:
        section = dict(ConfigLoader._section(config, "protocol", ProtocolTiming))
        for key in _BAND_KEYS:
            if key in section:
                section[key] = tuple(section[key])
        return ProtocolTiming(**section)

    @staticmethod
    def get_plot_settings(config: dict[str, Any]) -> PlotSettings:
        section = ConfigLoader._section(config, "plot", PlotSettings)
        return PlotSettings(**section)


def load_config(config_path: str | Path | None) -> tuple[ProtocolTiming, PlotSettings]:
    """Protocol timing and plot settings from ``config_path`` (defaults if None).

    The plot rounding unit follows the protocol unit unless set explicitly.
    """
    if config_path is None:
        return ProtocolTiming(), PlotSettings()

    config = ConfigLoader.load(config_path)
    timing = ConfigLoader.get_protocol_timing(config)
    plot_section = config.get("plot") or {}
    settings = ConfigLoader.get_plot_settings(config)
    if "round_to_us" not in plot_section:
        settings = replace(settings, round_to_us=timing.unit_us)
    return timing, settings
