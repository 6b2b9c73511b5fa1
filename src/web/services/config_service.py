from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Tuple

import yaml

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_BACKENDS = ('sqlite', 'memory')


class ConfigService:
    """
    Manages layered config:
    - config/default.yaml (checked in)
    - config/config.yaml (local overrides)
    - an explicit path, if given (applied last)
    """

    CONFIG_DIR = "config"

    @staticmethod
    def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        for k, v in (override or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                ConfigService._deep_merge(base[k], v)
            else:
                base[k] = v
        return base

    @staticmethod
    def _read_yaml(path: str) -> Dict[str, Any]:
        if not os.path.exists(path):
            return {}
        with open(path, "r") as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def load_effective_config(
        config_dir: Optional[str] = None,
        explicit_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        config_dir = config_dir or ConfigService.CONFIG_DIR
        default_path = os.path.join(config_dir, "default.yaml")
        overrides_path = os.path.join(config_dir, "config.yaml")

        merged = ConfigService._read_yaml(default_path)
        ConfigService._deep_merge(merged, ConfigService._read_yaml(overrides_path))

        if explicit_path and os.path.abspath(explicit_path) not in (
            os.path.abspath(default_path),
            os.path.abspath(overrides_path),
        ):
            ConfigService._deep_merge(merged, ConfigService._read_yaml(explicit_path))

        logging.debug(f"Effective config loaded from {config_dir}")
        return merged


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    for section in ('storage', 'log_path', 'log_level'):
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    storage = config.get('storage') or {}
    backend = storage.get('backend', 'sqlite')
    if backend not in VALID_BACKENDS:
        return False, f"storage.backend must be one of: {', '.join(VALID_BACKENDS)}"
    if backend == 'sqlite' and not isinstance(storage.get('path'), str):
        return False, "storage.path must be a string when storage.backend is 'sqlite'"
    for key in ('analytics_key', 'session_key'):
        if key in storage and (not isinstance(storage[key], str) or not storage[key]):
            return False, f"storage.{key} must be a non-empty string"
    if storage.get('analytics_key') is not None and storage.get('analytics_key') == storage.get('session_key'):
        return False, "storage.analytics_key and storage.session_key must differ"
    quota = storage.get('quota_bytes')
    if quota is not None and (not isinstance(quota, int) or quota <= 0):
        return False, "storage.quota_bytes must be a positive integer or null"

    dashboard = config.get('dashboard') or {}
    interval = dashboard.get('refresh_interval_s', 30.0)
    if not isinstance(interval, (int, float)) or interval <= 0:
        return False, "dashboard.refresh_interval_s must be a positive number"
    limit = dashboard.get('recent_events_limit', 20)
    if not isinstance(limit, int) or limit < 0:
        return False, "dashboard.recent_events_limit must be a non-negative integer"

    web = config.get('web') or {}
    port = web.get('port', 5000)
    if not isinstance(port, int) or not (0 < port < 65536):
        return False, "web.port must be an integer between 1 and 65535"

    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None
