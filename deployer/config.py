"""
Deployment Configuration
Loads config/deploy_config.json and applies .env overrides
"""

import os
import json
import copy
from typing import Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from .errors import ConfigError


DEFAULT_CONFIG_PATH = "config/deploy_config.json"

DEFAULTS = {
    'project_dir': '.',
    'crate_name': None,
    'toolchain': 'stable',
    'target': 'wasm32-unknown-unknown',
    'profile': 'release',
    'rustflags': '-C link-arg=-s',
    'cargo_bin': 'cargo',
    'near_bin': 'near',
    'network': 'testnet',
    'default_target': None,
    'targets': {}
}

# env var -> config key
ENV_OVERRIDES = {
    'DEPLOY_PROJECT_DIR': 'project_dir',
    'DEPLOY_CRATE_NAME': 'crate_name',
    'CARGO_BIN': 'cargo_bin',
    'NEAR_BIN': 'near_bin',
    'NEAR_ENV': 'network'
}


def load_config(path: Optional[str] = None) -> Dict:
    """
    Load deployment configuration

    Precedence is defaults, then the JSON file, then environment
    variables (including those read from .env).

    Args:
        path: Config file path (defaults to config/deploy_config.json)

    Returns:
        Config dict
    """
    load_dotenv()

    config = copy.deepcopy(DEFAULTS)
    config_path = path or DEFAULT_CONFIG_PATH

    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Malformed config file {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

        config.update(file_config)
        logger.debug(f"Loaded config from {config_path}")
    elif path:
        raise ConfigError(f"Config file not found: {path}")
    else:
        logger.warning(f"{config_path} not found, using defaults")

    for env_var, key in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            config[key] = value

    if not isinstance(config.get('targets'), dict):
        raise ConfigError("'targets' must map aliases to account ids")

    return config


def resolve_account(config: Dict, name: Optional[str] = None) -> str:
    """
    Resolve the target account for a run

    An alias from config['targets'] maps to its account id; anything else
    is taken as a literal account id.

    Args:
        config: Deployment config
        name: Alias or account id (falls back to DEPLOY_ACCOUNT, then default_target)

    Returns:
        Account id
    """
    if name is None:
        name = os.getenv('DEPLOY_ACCOUNT') or config.get('default_target')

    if not name or not name.strip():
        raise ConfigError("No target account given (pass one or set DEPLOY_ACCOUNT)")

    name = name.strip()
    return config['targets'].get(name, name)
