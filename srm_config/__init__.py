"""
srm_config -- single public entrypoint for SRM engine configuration.

Responsibility:
    Provides the runtime way to obtain configuration through
    ``get_active_config()``: the default grading rule, cleansing toggles,
    default supplier rating, seeding sizes and region code overrides.

Architecture position:
    Configuration -- YAML-driven.  Sits above ``srm_kernel`` and below
    ``srm_services``.  Engines and ingestion never import this package;
    services pass the values they need down as arguments.

Invariants enforced:
    - Single entrypoint: services obtain configuration through
      ``get_active_config()``.
    - Deterministic parsing: the same YAML always yields the same
      ``SrmConfig`` and checksum.

Failure modes:
    - ``FileNotFoundError`` -- configuration file missing.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``KeyError`` -- required key missing.
    - ``ConfigurationError`` subclasses -- invalid rule, weight or field.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``SRM_CONFIG_TRACE`` log entry with the config id, version, checksum,
    category count and metric count.
"""

from __future__ import annotations

import logging
from pathlib import Path

from srm_config.loader import compute_checksum, load_config
from srm_config.schema import SeedingConfig, SrmConfig

_logger = logging.getLogger("srm_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "srm.yaml"


def get_active_config(path: Path | str | None = None) -> SrmConfig:
    """
    Load and return the active configuration.

    Args:
        path: Override path to a YAML file.  Defaults to the packaged
            ``srm_config/defaults/srm.yaml``.

    Returns:
        Frozen ``SrmConfig``.  Not cached; callers hold the instance.
    """
    config = load_config(Path(path) if path is not None else DEFAULT_CONFIG_PATH)

    _logger.info(
        "SRM_CONFIG_TRACE",
        extra={
            "trace_type": "SRM_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "category_count": len(config.grading_rule.categories),
            "metric_count": len(config.grading_rule.metrics),
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SeedingConfig",
    "SrmConfig",
    "compute_checksum",
    "get_active_config",
    "load_config",
]
