import json
from copy import deepcopy
from pathlib import Path

from utils.logging_setup import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_DIR = Path.home() / ".i18n_key_lookup"

DEFAULT_CONFIG = {
    "lookup": {
        "locales_dir": "config/locales",
        "file_pattern": r"\.yml$",
        "separator": ":  ",
        "quote_style": "single",
        "namespace": "I18n",
        "project_root_markers": ["Gemfile", "config/application.rb", ".git"],
    },
    "cache": {
        "path": None,
    },
    "logging": {
        "level": "INFO",
    },
}


class ConfigManager:
    """Layered JSON configuration with dot notation access.

    Built-in defaults are overridden by default_config.json, which is in turn
    overridden by user_config.json, both read from the config directory.
    """

    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.default_config_path = self.config_dir / "default_config.json"
        self.user_config_path = self.config_dir / "user_config.json"
        self.config = self.load_config()

    def _read_json(self, path: Path) -> dict:
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load config {path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config {path}: top level must be an object")
            return {}
        return data

    def load_config(self):
        """Load configuration from files, merging user config with defaults."""
        merged = self.merge_configs(DEFAULT_CONFIG, self._read_json(self.default_config_path))
        return self.merge_configs(merged, self._read_json(self.user_config_path))

    def merge_configs(self, default, user):
        """Recursively merge user config with default config."""
        merged = deepcopy(default)

        for key, value in user.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self.merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def save_user_config(self, config):
        """Save user configuration to file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.user_config_path, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=4)
            self.config = self.load_config()  # Reload config
            return True
        except OSError as e:
            logger.error(f"Error saving user config: {e}")
            return False

    def get(self, key, default=None):
        """Get a configuration value using dot notation."""
        try:
            value = self.config
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key, value):
        """Set a configuration value using dot notation and persist it as user config."""
        user_config = self._read_json(self.user_config_path)
        keys = key.split('.')
        current = user_config

        for k in keys[:-1]:
            if k not in current or not isinstance(current[k], dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value
        return self.save_user_config(user_config)
