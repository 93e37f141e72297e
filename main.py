"""
Contract Deployer - Main Entry Point
Builds the contract to wasm and deploys it to a NEAR account
"""

import argparse
import sys
from loguru import logger

from deployer import DeployRunner, ConfigError, load_config, resolve_account

# Exit status for an invalid invocation or config
CONFIG_ERROR_EXIT = 2
# Exit status after Ctrl-C (128 + SIGINT)
INTERRUPTED_EXIT = 130


def configure_logging(verbose: bool = False):
    """Console and rotating file sinks"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="DEBUG" if verbose else "INFO"
    )
    logger.add(
        "data/logs/deploy.log",
        rotation="1 day",
        retention="7 days",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        level="DEBUG"
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the contract and deploy it to a NEAR account")
    parser.add_argument(
        "account",
        nargs="?",
        help="Target account id or alias from the config (default: DEPLOY_ACCOUNT / default_target)"
    )
    parser.add_argument("--config", help="Config file (default: config/deploy_config.json)")
    parser.add_argument("--project-dir", help="Directory holding the contract's Cargo.toml")
    parser.add_argument("--dry-run", action="store_true", help="Print the commands without running them")
    parser.add_argument("--skip-build", action="store_true", help="Deploy the existing artifact")
    parser.add_argument("--list-targets", action="store_true", help="List configured target aliases")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def list_targets(config: dict):
    targets = config['targets']

    if not targets:
        print("No targets configured")
        return

    default = config.get('default_target')
    for alias, account in sorted(targets.items()):
        marker = " (default)" if alias == default else ""
        print(f"{alias:<20} {account}{marker}")


def main(argv=None) -> int:
    """
    Run the deployer

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
        if args.project_dir:
            config['project_dir'] = args.project_dir

        if args.list_targets:
            list_targets(config)
            return 0

        account = resolve_account(config, args.account)
        runner = DeployRunner(config)

        if args.dry_run:
            logger.info(f"Dry run for {account}:")
            for line in runner.plan(account, skip_build=args.skip_build):
                logger.info(f"  > {line}")
            return 0

        logger.info("=" * 70)
        logger.info(f"🚀 Deploying contract to {account}")
        logger.info("=" * 70)

        return runner.run(account, skip_build=args.skip_build)

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return CONFIG_ERROR_EXIT
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return INTERRUPTED_EXIT


if __name__ == "__main__":
    sys.exit(main())
