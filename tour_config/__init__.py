"""
tour_config -- single public entrypoint for engine configuration.

Responsibility:
    ``get_active_config()`` is the only way services obtain the
    configuration constants the engines take as parameters (refund type
    code, bill chunk size, default administrative cost, display labels).

Architecture position:
    Configuration -- sits above ``tour_kernel`` and below
    ``tour_modules``.  The engines never import from this package; services
    read settings here and pass plain values down.

Failure modes:
    - ``ConfigNotFoundError`` -- the requested file does not exist.
    - ``InvalidConfigError`` -- missing keys or out-of-range values.
    - ``yaml.YAMLError`` -- malformed YAML.

Every successful call emits a ``TOUR_CONFIG_TRACE`` log entry carrying the
config_id, version and checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tour_config.loader import load_yaml_file, parse_engine_settings
from tour_config.schema import EngineSettings, PaymentLabelSettings

_logger = logging.getLogger("tour_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> EngineSettings:
    """Load, validate and return engine settings.

    Args:
        config_path: YAML file to load.  Defaults to the bundled
            ``sets/default.yaml``.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    settings = parse_engine_settings(load_yaml_file(path))

    _logger.info(
        "TOUR_CONFIG_TRACE",
        extra={
            "trace_type": "TOUR_CONFIG_TRACE",
            "config_id": settings.config_id,
            "config_version": settings.version,
            "checksum": settings.checksum,
            "config_path": str(path),
        },
    )
    return settings


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "EngineSettings",
    "PaymentLabelSettings",
    "get_active_config",
]
