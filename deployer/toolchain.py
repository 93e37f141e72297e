"""
Toolchain Commands
Builds the cargo and near-cli invocations for a deployment run
"""

import os
import re
import shlex
from typing import Dict, List, Optional

from .errors import ConfigError


WASM_TARGET = "wasm32-unknown-unknown"
RELEASE_PROFILE = "release"
STRIP_FLAG = "-C link-arg=-s"


def build_command(config: Dict) -> List[str]:
    """
    Compose the cargo build command

    Args:
        config: Deployment config

    Returns:
        argv for the build step
    """
    command = [config.get('cargo_bin') or 'cargo']

    toolchain = config.get('toolchain')
    if toolchain:
        command.append(f"+{toolchain}")

    command += ['build', '--target', config.get('target') or WASM_TARGET]

    profile = config.get('profile') or RELEASE_PROFILE
    if profile == RELEASE_PROFILE:
        command.append('--release')
    else:
        command += ['--profile', profile]

    return command


def build_env(config: Dict, base_env: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """
    Environment for the build step with the size flags in RUSTFLAGS

    Existing RUSTFLAGS are kept and the configured flags are appended once.
    """
    env = dict(os.environ if base_env is None else base_env)

    flags = config.get('rustflags', STRIP_FLAG)
    if not flags:
        return env

    current = env.get('RUSTFLAGS', '').strip()
    if _contains_flags(shlex.split(current), shlex.split(flags)):
        return env

    env['RUSTFLAGS'] = f"{current} {flags}".strip()
    return env


def _contains_flags(current: List[str], flags: List[str]) -> bool:
    """True when flags appear as a whole, consecutive run of tokens in current"""
    size = len(flags)
    return any(current[i:i + size] == flags for i in range(len(current) - size + 1))


def deploy_env(config: Dict, base_env: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Environment for the deploy step, selecting the NEAR network"""
    env = dict(os.environ if base_env is None else base_env)

    network = config.get('network')
    if network:
        env['NEAR_ENV'] = network

    return env


def read_crate_name(project_dir: str) -> str:
    """
    Read the package name from Cargo.toml

    Args:
        project_dir: Directory holding Cargo.toml

    Returns:
        Package name as written in the manifest
    """
    cargo_toml = os.path.join(project_dir, "Cargo.toml")

    if not os.path.isfile(cargo_toml):
        raise ConfigError(f"No Cargo.toml in {project_dir}")

    with open(cargo_toml, 'r') as f:
        content = f.read()

    # name must sit inside [package], before the next table header
    match = re.search(
        r'^\[package\](?:(?!^\[).)*?^\s*name\s*=\s*"([^"]+)"',
        content,
        re.MULTILINE | re.DOTALL
    )
    if not match:
        raise ConfigError(f"Could not find package name in {cargo_toml}")

    return match.group(1)


def artifact_path(config: Dict) -> str:
    """
    Path of the compiled contract

    target/<triple>/<profile>/<crate>.wasm under the project directory.
    Cargo writes hyphenated crate names with underscores.
    """
    project_dir = config.get('project_dir') or '.'
    crate_name = config.get('crate_name') or read_crate_name(project_dir)

    wasm_filename = crate_name.replace('-', '_') + '.wasm'

    return os.path.join(
        project_dir,
        'target',
        config.get('target') or WASM_TARGET,
        _profile_dir(config.get('profile') or RELEASE_PROFILE),
        wasm_filename
    )


def _profile_dir(profile: str) -> str:
    """cargo writes the dev profile to target/<triple>/debug"""
    return 'debug' if profile == 'dev' else profile


def deploy_command(account: str, artifact: str, config: Dict) -> List[str]:
    """
    Compose the near-cli deploy command

    Args:
        account: Target account id
        artifact: Path to the compiled .wasm
        config: Deployment config

    Returns:
        argv for the deploy step
    """
    return [config.get('near_bin') or 'near', 'deploy', account, '--wasmFile', artifact]


def format_command(command: List[str], env: Optional[Dict[str, str]] = None) -> str:
    """Render a command as it would be typed in a shell"""
    rendered = ' '.join(shlex.quote(part) for part in command)

    if env and env.get('RUSTFLAGS'):
        rendered = f"RUSTFLAGS={shlex.quote(env['RUSTFLAGS'])} {rendered}"

    return rendered
