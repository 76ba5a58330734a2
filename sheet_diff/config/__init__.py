"""Configuration management."""

from .manager import ConfigManager, SessionConfig, SourceConfig, ReportConfig

__all__ = ["ConfigManager", "SessionConfig", "SourceConfig", "ReportConfig"]
