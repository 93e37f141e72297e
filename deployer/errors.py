"""
Deployer Errors
Failures raised by the build and deploy steps
"""

from typing import List, Optional


class DeployerError(Exception):
    """Base class for deployer errors"""


class ConfigError(DeployerError):
    """Invalid or incomplete deployment configuration"""


class StepFailed(DeployerError):
    """
    An external tool exited with a non-zero status

    The underlying cause is not classified; the tool's own output has
    already been written to the terminal.
    """

    step = 'step'

    def __init__(self, returncode: int, command: Optional[List[str]] = None, message: str = ''):
        self.returncode = returncode
        self.command = command or []
        super().__init__(message or f"{self.step} failed with exit code {returncode}")


class BuildFailed(StepFailed):
    """Toolchain reported a non-zero exit status"""

    step = 'build'


class DeployFailed(StepFailed):
    """Deployment tool reported a non-zero exit status"""

    step = 'deploy'
