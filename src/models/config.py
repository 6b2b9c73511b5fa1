"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DEFAULT_ANALYTICS_KEY = "portfolio_analytics"
DEFAULT_SESSION_KEY = "portfolio_session"


@dataclass
class StorageConfig:
    """Durable key/value slot configuration."""
    backend: str = "sqlite"
    path: str = "data/analytics.sqlite"
    analytics_key: str = DEFAULT_ANALYTICS_KEY
    session_key: str = DEFAULT_SESSION_KEY
    quota_bytes: Optional[int] = 5 * 1024 * 1024

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StorageConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            backend=d.get("backend", "sqlite"),
            path=d.get("path", "data/analytics.sqlite"),
            analytics_key=d.get("analytics_key", DEFAULT_ANALYTICS_KEY),
            session_key=d.get("session_key", DEFAULT_SESSION_KEY),
            quota_bytes=d.get("quota_bytes", 5 * 1024 * 1024),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "path": self.path,
            "analytics_key": self.analytics_key,
            "session_key": self.session_key,
            "quota_bytes": self.quota_bytes,
        }


@dataclass
class DashboardConfig:
    """Dashboard polling configuration."""
    refresh_interval_s: float = 30.0
    recent_events_limit: int = 20

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DashboardConfig":
        return cls(
            refresh_interval_s=d.get("refresh_interval_s", 30.0),
            recent_events_limit=d.get("recent_events_limit", 20),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "refresh_interval_s": self.refresh_interval_s,
            "recent_events_limit": self.recent_events_limit,
        }


@dataclass
class WebConfig:
    """Dashboard API server configuration."""
    host: str = "127.0.0.1"
    port: int = 5000

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            host=d.get("host", "127.0.0.1"),
            port=d.get("port", 5000),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "port": self.port}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    storage: StorageConfig = field(default_factory=StorageConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/portfolio_analytics.log"
    log_level: str = "INFO"
    user_agent: Optional[str] = None
    referrer: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            storage=StorageConfig.from_dict(d.get("storage", {}) or {}),
            dashboard=DashboardConfig.from_dict(d.get("dashboard", {}) or {}),
            web=WebConfig.from_dict(d.get("web", {}) or {}),
            log_path=d.get("log_path", "logs/portfolio_analytics.log"),
            log_level=d.get("log_level", "INFO"),
            user_agent=d.get("user_agent"),
            referrer=d.get("referrer"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        d: Dict[str, Any] = {
            "storage": self.storage.to_dict(),
            "dashboard": self.dashboard.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
        if self.user_agent is not None:
            d["user_agent"] = self.user_agent
        if self.referrer is not None:
            d["referrer"] = self.referrer
        return d
