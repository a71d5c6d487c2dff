"""
NexaValid Core Module
=====================

Configuration management shared by the validation engine and the
HTTP helper.
"""

from nexavalid.core.config import Config, apply_logging, get_config, reset_config

__all__ = [
    "Config",
    "get_config",
    "reset_config",
    "apply_logging",
]
