"""
Deploy Runner
Compiles the contract to wasm, then deploys it to the target account
"""

import os
import subprocess
from typing import Dict, List, Optional
from loguru import logger

from .errors import DeployerError, StepFailed, BuildFailed, DeployFailed
from .toolchain import (
    build_command,
    build_env,
    deploy_command,
    deploy_env,
    artifact_path,
    format_command
)


# Exit statuses a shell reports for a command it cannot run or find
COMMAND_NOT_EXECUTABLE = 126
COMMAND_NOT_FOUND = 127
# Added to the signal number when a command is killed by a signal
SIGNAL_EXIT_BASE = 128


class DeployRunner:
    """
    Two-step, fail-fast build and deploy

    States: idle -> building -> deploying -> succeeded, with failed
    reachable from either step. Nothing is retried and nothing carries
    over between runs.
    """

    IDLE = 'idle'
    BUILDING = 'building'
    DEPLOYING = 'deploying'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'

    def __init__(self, config: Dict):
        """
        Initialize Deploy Runner

        Args:
            config: Deployment config (see deployer.config.load_config)
        """
        self.config = config
        self.project_dir = config.get('project_dir') or '.'
        self.state = self.IDLE
        self.artifact = None

    def run(self, account: str, skip_build: bool = False) -> int:
        """
        Build and deploy, returning the process exit code

        Args:
            account: Target account id
            skip_build: Deploy the existing artifact without rebuilding

        Returns:
            0 on success, otherwise the first non-zero step exit code
        """
        try:
            self.execute(account, skip_build=skip_build)
        except StepFailed as e:
            logger.error(f"❌ {e}")
            return e.returncode

        return 0

    def execute(self, account: str, skip_build: bool = False) -> str:
        """
        Build and deploy, raising on the first failing step

        Args:
            account: Target account id
            skip_build: Deploy the existing artifact without rebuilding

        Returns:
            Path of the deployed artifact
        """
        if not isinstance(account, str) or not account.strip():
            raise ValueError("Target account must be a non-empty string")

        account = account.strip()
        self.artifact = None

        try:
            if skip_build:
                logger.info("Skipping build, using existing artifact")
                self.artifact = self._existing_artifact()
            else:
                self.artifact = self.build()

            self.deploy(account, self.artifact)
        except DeployerError:
            self.state = self.FAILED
            raise

        self.state = self.SUCCEEDED
        logger.success(f"✅ Deployed {self.artifact} to {account}")

        return self.artifact

    def build(self) -> str:
        """
        Compile the contract

        Returns:
            Path of the compiled artifact
        """
        self.state = self.BUILDING

        artifact = artifact_path(self.config)
        command = build_command(self.config)
        env = build_env(self.config)

        logger.info(f"Building contract in {self.project_dir}")
        logger.debug(format_command(command, env))

        returncode = self._run_step(command, env, cwd=self.project_dir)
        if returncode != 0:
            raise BuildFailed(returncode, command)

        if not os.path.isfile(artifact):
            raise BuildFailed(1, command, f"Build finished but artifact not found: {artifact}")

        logger.success(f"Built {artifact} ({os.path.getsize(artifact):,} bytes)")
        return artifact

    def deploy(self, account: str, artifact: str):
        """
        Push the artifact to the account

        Args:
            account: Target account id
            artifact: Path to the compiled .wasm
        """
        self.state = self.DEPLOYING

        command = deploy_command(account, artifact, self.config)
        env = deploy_env(self.config)

        logger.info(f"Deploying to {account} ({env.get('NEAR_ENV', 'default network')})")
        logger.debug(format_command(command))

        returncode = self._run_step(command, env)
        if returncode != 0:
            raise DeployFailed(returncode, command)

    def plan(self, account: str, skip_build: bool = False) -> List[str]:
        """
        Commands a run would execute, rendered for display

        Args:
            account: Target account id
            skip_build: Leave out the build command

        Returns:
            Shell-style command lines in execution order
        """
        artifact = artifact_path(self.config)
        lines = []

        if not skip_build:
            lines.append(format_command(build_command(self.config), build_env(self.config, {})))

        lines.append(format_command(deploy_command(account, artifact, self.config)))
        return lines

    def _existing_artifact(self) -> str:
        artifact = artifact_path(self.config)

        if not os.path.isfile(artifact):
            raise DeployFailed(1, message=f"Artifact not found: {artifact} (run without --skip-build)")

        return artifact

    def _run_step(self, command: List[str], env: Dict[str, str], cwd: Optional[str] = None) -> int:
        """Run one external tool, streaming its output, and return its exit code"""
        try:
            result = subprocess.run(command, cwd=cwd, env=env)
        except FileNotFoundError:
            logger.error(f"{command[0]} not found on PATH")
            return COMMAND_NOT_FOUND
        except PermissionError:
            logger.error(f"{command[0]} is not executable")
            return COMMAND_NOT_EXECUTABLE

        # subprocess reports death by signal N as -N
        if result.returncode < 0:
            logger.error(f"{command[0]} killed by signal {-result.returncode}")
            return SIGNAL_EXIT_BASE - result.returncode

        return result.returncode
