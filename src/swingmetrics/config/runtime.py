"""Runtime configuration for the session recorder."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

import yaml

_TIMESTAMP_MODES = ("nominal", "monotonic")
_OVERFLOW_POLICIES = ("reject", "auto_stop")
_DISPATCH_MODES = ("queue", "inline")


@dataclass(slots=True)
class RecorderConfig:
    """
    Tuning knobs for how a session captures and exports samples.

    The defaults reproduce the watch build: 50 ms polling on both sensors,
    64000 rows of capacity, timestamps synthesized from the nominal period,
    and ``%f`` fields separated by ``", "``.
    """

    capacity: int = 64000
    interval_ms: int = 50
    # None -> interval_ms / 1000
    nominal_interval_seconds: Optional[float] = None
    timestamp_mode: str = "nominal"
    always_on: bool = True

    allow_partial_capture: bool = False
    overflow_policy: str = "reject"
    dispatch_mode: str = "queue"

    output_path: Optional[Path] = None
    float_format: str = "%f"
    delimiter: str = ", "
    legacy_trailing_comma: bool = False

    @property
    def interval_seconds(self) -> float:
        if self.nominal_interval_seconds is not None:
            return float(self.nominal_interval_seconds)
        return self.interval_ms / 1000.0

    def sanitized(self) -> RecorderConfig:
        """Return a copy with limits applied and enumerations validated."""
        timestamp_mode = str(self.timestamp_mode).strip().lower()
        if timestamp_mode not in _TIMESTAMP_MODES:
            raise ValueError(f"timestamp_mode must be one of {_TIMESTAMP_MODES}, got {self.timestamp_mode!r}")
        overflow_policy = str(self.overflow_policy).strip().lower().replace("-", "_")
        if overflow_policy not in _OVERFLOW_POLICIES:
            raise ValueError(f"overflow_policy must be one of {_OVERFLOW_POLICIES}, got {self.overflow_policy!r}")
        dispatch_mode = str(self.dispatch_mode).strip().lower()
        if dispatch_mode not in _DISPATCH_MODES:
            raise ValueError(f"dispatch_mode must be one of {_DISPATCH_MODES}, got {self.dispatch_mode!r}")

        nominal = self.nominal_interval_seconds
        if nominal is not None:
            nominal = max(1e-6, float(nominal))
        output_path = Path(self.output_path).expanduser() if self.output_path is not None else None

        return RecorderConfig(
            capacity=max(1, int(self.capacity)),
            interval_ms=max(1, int(self.interval_ms)),
            nominal_interval_seconds=nominal,
            timestamp_mode=timestamp_mode,
            always_on=bool(self.always_on),
            allow_partial_capture=bool(self.allow_partial_capture),
            overflow_policy=overflow_policy,
            dispatch_mode=dispatch_mode,
            output_path=output_path,
            float_format=str(self.float_format),
            delimiter=str(self.delimiter),
            legacy_trailing_comma=bool(self.legacy_trailing_comma),
        )


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`RecorderConfig`."""
    return {f.name for f in fields(RecorderConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``recorder`` block into the root mapping."""
    if "recorder" in data and isinstance(data["recorder"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "recorder":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> RecorderConfig:
    """Build :class:`RecorderConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return RecorderConfig().sanitized()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return RecorderConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> RecorderConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to the default :class:`RecorderConfig`.
    """
    if path is None:
        return RecorderConfig().sanitized()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return RecorderConfig().sanitized()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["RecorderConfig", "config_from_mapping", "load_config"]
