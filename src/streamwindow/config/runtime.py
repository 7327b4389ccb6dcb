"""Runtime configuration for the windowing pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping, Optional

import yaml

from ..core.errors import InvalidConfiguration

GENERATION_ERROR_POLICIES = ("abort", "exclude")


def _default_streams() -> List[str]:
    return [f"Series {label}" for label in "ABCDE"]


@dataclass(slots=True)
class WindowConfig:
    """
    Tuning knobs for dataset size, ingestion batch, retention and cadences.

    The defaults describe the stock demo: five streams of 2500 unique
    points, five points per frame, a 1000-sample window trimmed every second
    and a rate readout refreshed every second and reset every five.
    """

    streams: List[str] = field(default_factory=_default_streams)
    z_levels: Optional[List[float]] = None
    unique_points: int = 2500
    points_per_frame: int = 5
    retention_window: int = 1000

    trim_interval_ms: float = 1000.0
    rate_interval_ms: float = 1000.0
    rate_reset_ms: float = 5000.0
    frame_rate_hz: float = 60.0

    wrap_cursor: bool = False
    on_generation_error: str = "abort"

    generator_step: float = 1.0
    seed: Optional[int] = None
    title: str = "3D Realtime Line Series"

    @property
    def half_length(self) -> int:
        """Points requested from the generator per stream."""
        return int(self.unique_points) // 2

    def z_level(self, index: int) -> float:
        """Z tag for the stream at ``index`` (its position unless overridden)."""
        if self.z_levels is not None and index < len(self.z_levels):
            return float(self.z_levels[index])
        return float(index)

    def validate(self) -> WindowConfig:
        """Raise :class:`InvalidConfiguration` for any out-of-range value."""
        if not self.streams:
            raise InvalidConfiguration("at least one stream is required")
        if len(set(self.streams)) != len(self.streams):
            raise InvalidConfiguration(f"stream names must be unique: {self.streams!r}")
        if self.half_length < 2:
            raise InvalidConfiguration(
                f"unique_points must be >= 4 (half length >= 2), got {self.unique_points}"
            )
        if self.points_per_frame <= 0:
            raise InvalidConfiguration("points_per_frame must be positive")
        if self.retention_window <= 0:
            raise InvalidConfiguration("retention_window must be positive")
        for name in ("trim_interval_ms", "rate_interval_ms", "rate_reset_ms", "frame_rate_hz"):
            if float(getattr(self, name)) <= 0:
                raise InvalidConfiguration(f"{name} must be positive")
        if self.generator_step <= 0:
            raise InvalidConfiguration("generator_step must be positive")
        if self.seed is not None and self.seed < 0:
            raise InvalidConfiguration(f"seed must be non-negative, got {self.seed}")
        if self.on_generation_error not in GENERATION_ERROR_POLICIES:
            raise InvalidConfiguration(
                f"on_generation_error must be one of {GENERATION_ERROR_POLICIES}, "
                f"got {self.on_generation_error!r}"
            )
        return self

    def sanitized(self) -> WindowConfig:
        """Return a validated copy with values coerced to their field types."""
        streams = [self.streams] if isinstance(self.streams, str) else self.streams
        try:
            cfg = WindowConfig(
                streams=[str(name) for name in streams],
                z_levels=None if self.z_levels is None else [float(z) for z in self.z_levels],
                unique_points=int(self.unique_points),
                points_per_frame=int(self.points_per_frame),
                retention_window=int(self.retention_window),
                trim_interval_ms=float(self.trim_interval_ms),
                rate_interval_ms=float(self.rate_interval_ms),
                rate_reset_ms=float(self.rate_reset_ms),
                frame_rate_hz=float(self.frame_rate_hz),
                wrap_cursor=bool(self.wrap_cursor),
                on_generation_error=str(self.on_generation_error).strip().lower(),
                generator_step=float(self.generator_step),
                seed=None if self.seed is None else int(self.seed),
                title=str(self.title),
            )
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"invalid configuration value: {exc}") from exc
        return cfg.validate()

    def to_mapping(self) -> dict:
        """Serialize back into a mapping suitable for YAML."""
        return {"window": {f.name: getattr(self, f.name) for f in fields(WindowConfig)}}


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`WindowConfig`."""
    return {f.name for f in fields(WindowConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``window`` block into the root mapping."""
    if "window" in data and isinstance(data["window"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "window":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> WindowConfig:
    """Build :class:`WindowConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return WindowConfig().sanitized()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return WindowConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> WindowConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to the default :class:`WindowConfig`.
    """
    if path is None:
        return WindowConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return WindowConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise InvalidConfiguration(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


def save_config(path: str | Path, cfg: WindowConfig) -> None:
    """Write ``cfg`` as YAML, creating parent directories as needed."""
    cfg_path = Path(path)
    if cfg_path.parent and not cfg_path.parent.exists():
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
    with cfg_path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(cfg.to_mapping(), fh, default_flow_style=False, sort_keys=False)


__all__ = ["WindowConfig", "config_from_mapping", "load_config", "save_config"]
