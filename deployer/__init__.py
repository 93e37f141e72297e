"""
Deployer Package
Build a contract to WebAssembly and push it to a NEAR account
"""

from .errors import DeployerError, ConfigError, StepFailed, BuildFailed, DeployFailed
from .config import load_config, resolve_account
from .runner import DeployRunner

__all__ = [
    'DeployerError',
    'ConfigError',
    'StepFailed',
    'BuildFailed',
    'DeployFailed',
    'load_config',
    'resolve_account',
    'DeployRunner'
]
