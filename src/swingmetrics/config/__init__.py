"""Configuration objects and helpers for SwingMetrics.

:mod:`runtime` loads the optional YAML file describing how a session samples,
buffers and exports; :mod:`app_config` knows where recordings live on disk.
"""

from .runtime import RecorderConfig, config_from_mapping, load_config

__all__ = ["RecorderConfig", "config_from_mapping", "load_config"]
