"""
Configuration Loader for KeepFOSS
Loads app_config.json and applies overrides from a .env file
"""

import copy
import json
from pathlib import Path
from typing import Dict, Any, Optional

from .logger import log_error

PROJECT_ROOT = Path(__file__).parent.parent.parent

DEFAULT_CONFIG: Dict[str, Any] = {
    "app": {
        "name": "KeepFOSS",
        "version": "1.0.0"
    },
    "database": {
        "user_name": "default_user",
        "data_dir": None,
        "connect_retries": 3
    },
    "backup": {
        "filename_prefix": "keepfoss_backup",
        "indent": 2
    },
    "logging": {
        "level": "INFO"
    }
}

# .env key -> dotted config key
ENV_MAPPINGS = {
    'LOG_LEVEL': 'logging.level',
    'KEEPFOSS_USER': 'database.user_name',
    'KEEPFOSS_DATA_DIR': 'database.data_dir',
    'DB_RETRIES': 'database.connect_retries',
    'BACKUP_PREFIX': 'backup.filename_prefix',
    'BACKUP_INDENT': 'backup.indent',
}

# Config keys whose .env values stay text even when they look numeric
STRING_KEYS = {'database.user_name', 'database.data_dir', 'backup.filename_prefix', 'logging.level'}


def load_env_file(env_path: Path) -> Dict[str, str]:
    """
    Parse a dotenv-style file into a dict.
    
    Blank lines and ``#`` comments are skipped, each line is split on the
    first ``=`` and surrounding quotes are stripped from the value. A missing
    or unreadable file yields an empty dict; read errors are logged.
    """
    env_vars = {}
    if env_path.exists():
        try:
            with open(env_path, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        value = value.strip().strip('"').strip("'")
                        env_vars[key.strip()] = value
        except OSError as e:
            log_error(f"Error loading .env file: {e}")
    return env_vars


def _coerce(value: str) -> Any:
    if value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    if value.isdigit():
        return int(value)
    if value.count('.') == 1 and value.replace('.', '').isdigit():
        return float(value)
    return value


class ConfigLoader:
    """Loads and manages application configuration"""
    
    def __init__(self, config_path: Optional[Path] = None,
                 env_path: Optional[Path] = None):
        """
        Args:
            config_path: JSON config file.
                Defaults to ``<project root>/config/app_config.json``.
            env_path: dotenv file. Defaults to ``<project root>/.env``.
        """
        self.config_path = config_path or PROJECT_ROOT / "config" / "app_config.json"
        self.env_path = env_path or PROJECT_ROOT / ".env"
        self.config_data: Dict[str, Any] = {}
        self.env_vars: Dict[str, str] = {}
        self.load_config()
    
    def load_config(self) -> None:
        """
        Read the config file (writing defaults when it does not exist yet),
        then apply .env overrides in memory. An unreadable or malformed file
        falls back to the defaults.
        """
        self.env_vars = load_env_file(self.env_path)
        
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    self.config_data = json.load(f)
            else:
                self.create_default_config()
        except (OSError, ValueError) as e:
            log_error(f"Error loading config: {e}")
            self.create_default_config()
        
        self._apply_env_overrides()
    
    def _apply_env_overrides(self) -> None:
        for env_key, config_key in ENV_MAPPINGS.items():
            if env_key in self.env_vars:
                value = self.env_vars[env_key]
                if config_key not in STRING_KEYS:
                    value = _coerce(value)
                self.set(config_key, value, save=False)
    
    def create_default_config(self) -> None:
        """Reset to the built-in defaults and persist them"""
        self.config_data = copy.deepcopy(DEFAULT_CONFIG)
        self.save_config()
    
    def save_config(self) -> None:
        """
        Write the in-memory configuration as indented JSON, creating parent
        directories as needed. Failures are logged, not raised.
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.config_data, f, indent=4)
        except OSError as e:
            log_error(f"Error saving config: {e}")
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Return the value at a dot-notated path such as ``"backup.indent"``,
        or ``default`` when any segment is missing.
        """
        value = self.config_data
        
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        
        return value
    
    def get_env(self, key: str, default: str = "") -> str:
        """Value from the loaded .env file (the OS environment is not consulted)"""
        return self.env_vars.get(key, default)
    
    def set(self, key: str, value: Any, save: bool = True) -> None:
        """Set a dot-notated key, creating intermediate sections"""
        keys = key.split('.')
        config = self.config_data
        
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        
        config[keys[-1]] = value
        if save:
            self.save_config()
