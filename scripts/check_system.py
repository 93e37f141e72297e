"""
System Check Script
Verifies the toolchain and deploy CLI are usable before deploying
"""

import os
import shutil
import subprocess
import sys
from loguru import logger

from deployer import ConfigError, load_config
from deployer.toolchain import read_crate_name


def check_executable(name: str) -> bool:
    """Check that an executable is on PATH"""
    path = shutil.which(name)

    if not path:
        logger.error(f"  ✗ {name}: not found on PATH")
        return False

    logger.success(f"  ✓ {name}: {path}")
    return True


def check_toolchain(config: dict) -> bool:
    """Check cargo is available"""
    logger.info("Checking Rust toolchain...")
    return check_executable(config['cargo_bin'])


def check_wasm_target(config: dict) -> bool:
    """Check the wasm target is installed for the configured toolchain"""
    target = config['target']
    logger.info(f"Checking {target} target...")

    if not shutil.which('rustup'):
        logger.warning("  rustup not found - cannot verify installed targets")
        return True

    command = ['rustup']
    if config.get('toolchain'):
        command.append(f"+{config['toolchain']}")
    command += ['target', 'list', '--installed']

    result = subprocess.run(command, capture_output=True, text=True)
    if result.returncode != 0:
        logger.error(f"  ✗ rustup failed: {result.stderr.strip()}")
        return False

    if target not in result.stdout.split():
        logger.error(f"  ✗ {target} not installed")
        logger.info(f"  Run: rustup target add {target}")
        return False

    logger.success(f"  ✓ {target} installed")
    return True


def check_deploy_cli(config: dict) -> bool:
    """Check near-cli is available"""
    logger.info("Checking deploy CLI...")

    if not check_executable(config['near_bin']):
        logger.info("  Install: npm install -g near-cli")
        return False

    return True


def check_project(config: dict) -> bool:
    """Check the contract crate can be found"""
    logger.info("Checking contract project...")

    project_dir = config['project_dir']
    try:
        crate_name = read_crate_name(project_dir)
    except ConfigError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"  ✓ {crate_name} in {os.path.abspath(project_dir)}")

    if config.get('crate_name') and config['crate_name'].replace('-', '_') != crate_name.replace('-', '_'):
        logger.warning(f"  ⚠ Config crate_name '{config['crate_name']}' differs from Cargo.toml '{crate_name}'")

    return True


def run_checks(config: dict) -> list:
    """
    Run every check

    Returns:
        List of (name, passed) tuples
    """
    checks = [
        ("Rust Toolchain", check_toolchain),
        ("WASM Target", check_wasm_target),
        ("Deploy CLI", check_deploy_cli),
        ("Contract Project", check_project)
    ]

    results = []

    for name, check_func in checks:
        logger.info("")
        try:
            result = check_func(config)
        except OSError as e:
            logger.error(f"Error in {name}: {e}")
            result = False
        results.append((name, result))

    return results


def main():
    """Run all system checks"""
    logger.info("=" * 70)
    logger.info("Contract Deployer System Check")
    logger.info("=" * 70)

    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    results = run_checks(config)

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("=" * 70)
        logger.success("✅ Ready to deploy!")
        logger.success("=" * 70)
        logger.info("Deploy: python main.py <account>")
        return 0
    else:
        logger.error("=" * 70)
        logger.error("❌ Not ready - fix issues above")
        logger.error("=" * 70)
        return 1


if __name__ == "__main__":
    sys.exit(main())
