"""Configuration objects and helpers for streamwindow.

:mod:`runtime` holds the :class:`WindowConfig` dataclass and the YAML
loader; every runner builds its pipeline from one of these.
"""

from .runtime import WindowConfig, config_from_mapping, load_config, save_config

__all__ = ["WindowConfig", "config_from_mapping", "load_config", "save_config"]
