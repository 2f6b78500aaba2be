"""
Configuration loader for the process monitor.

This module provides the ConfigLoader class for loading and validating
monitor configuration from YAML files.
"""
from pathlib import Path
from typing import Optional

import yaml

from procmon.config.monitor_config import MonitorConfig
from procmon.consts.AttributeKind import AttributeKind

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config_yaml"


class ConfigLoader:

    def __init__(self, config_path: Path, env: Optional[str] = None):
        self.config_path = Path(config_path)
        self.env = env
        self.config_data = self._load_config()

    @classmethod
    def default(cls, env: Optional[str] = None) -> "ConfigLoader":
        return cls(DEFAULT_CONFIG_PATH, env=env)

    def _load_config(self) -> MonitorConfig:
        """
        Load and parse monitor configuration from YAML file.
        Supports environment-specific overrides via config_<env>.yaml
        
        Returns:
            MonitorConfig: Configured monitor configuration instance
        """
        base_config_file = self.config_path / "config.yaml"
        with open(base_config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        
        if self.env:
            env_config_file = self.config_path / f"config_{self.env}.yaml"
            with open(env_config_file, "r", encoding="utf-8") as f:
                env_data = yaml.safe_load(f) or {}
                # dict.update() will overwrite existing keys
                data.update(env_data)
        
        config = MonitorConfig()

        if "watch_interval" in data:
            config.watch_interval = self._positive(data, "watch_interval")
        if "sampling_interval" in data:
            config.sampling_interval = self._positive(data, "sampling_interval")
        if "idle_interval" in data:
            config.idle_interval = self._positive(data, "idle_interval")

        config.export_dir = str(data.get("export_dir", config.export_dir))
        config.log_level = str(data.get("log_level", config.log_level)).upper()
        config.log_file = data.get("log_file")

        if "attributes" in data:
            # AttributeKind raises ValueError for unknown names
            config.attributes = [AttributeKind(kind) for kind in data["attributes"]]

        return config

    @staticmethod
    def _positive(data: dict, key: str) -> float:
        value = float(data[key])
        if value <= 0:
            raise ValueError(f"'{key}' must be positive, got {value}")
        return value


if __name__ == "__main__":

    # python3 -m procmon.config.config_loader

    loader = ConfigLoader.default()
    print(loader.config_data)
