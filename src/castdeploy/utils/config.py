"""User configuration stored at ~/.castdeploy/config.yaml"""
import os
from dataclasses import asdict, dataclass
from typing import Optional

import yaml

from castdeploy.core.protocols import ConfigLoader
from castdeploy.deploy.exceptions import RemoteError
from castdeploy.i18n import DEFAULT_LANG, SUPPORTED_LANGS

CONFIG_DIR = '.castdeploy'
CONFIG_FILE = 'config.yaml'


@dataclass
class UserConfig:
    """User-level preferences."""
    lang: str = DEFAULT_LANG


def default_config_path() -> str:
    return os.path.join(os.path.expanduser('~'), CONFIG_DIR, CONFIG_FILE)


def load_user_config(loader: ConfigLoader, path: Optional[str] = None) -> UserConfig:
    """Load user config. Falls back to defaults on any read or parse error.

    Args:
        loader: Config loader (YamlConfigLoader in production)
        path: Config file path (default: ~/.castdeploy/config.yaml)

    Returns:
        UserConfig with unsupported values replaced by defaults
    """
    path = path or default_config_path()
    try:
        data = loader.load_yaml(path)
    except (OSError, RemoteError, yaml.YAMLError):
        return UserConfig()

    if not isinstance(data, dict):
        return UserConfig()

    lang = data.get('lang')
    if lang not in SUPPORTED_LANGS:
        lang = DEFAULT_LANG
    return UserConfig(lang=lang)


def save_user_config(config: UserConfig, path: Optional[str] = None) -> str:
    """Write user config as YAML, creating the directory if needed.

    Returns:
        Path written
    """
    if config.lang not in SUPPORTED_LANGS:
        raise ValueError(f"Unsupported language '{config.lang}' (expected one of {', '.join(SUPPORTED_LANGS)})")

    path = path or default_config_path()
    config_dir = os.path.dirname(path)
    if config_dir:
        os.makedirs(config_dir, exist_ok=True)
    with open(path, 'w') as f:
        yaml.safe_dump(asdict(config), f, default_flow_style=False)
    return path
