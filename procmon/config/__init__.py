"""Configuration module for the process monitor."""

from .monitor_config import MonitorConfig
from .config_loader import ConfigLoader

__all__ = ["MonitorConfig", "ConfigLoader"]
