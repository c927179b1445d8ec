"""Errors raised by the Terraform test harness."""


class HarnessError(Exception):
    """Base class for all harness failures."""


class ConfigError(HarnessError):
    """Raised when the harness configuration cannot be discovered or is invalid."""


class InstallError(HarnessError):
    """Raised when installing a pinned Terraform version from source fails."""

    def __init__(self, exit_description: str, stderr: str) -> None:
        self.exit_description = exit_description
        self.stderr = stderr
        super().__init__(
            f"failed to install terraform: {exit_description}\n\nstderr:\n{stderr}"
        )


class ProcessError(HarnessError):
    """Raised when a Terraform invocation does not exit successfully."""

    def __init__(self, exit_description: str, stderr: str) -> None:
        self.exit_description = exit_description
        self.stderr = stderr
        super().__init__(f"terraform failed: {exit_description}\n\nstderr:\n{stderr}")


class DecodeError(HarnessError):
    """Raised when Terraform output cannot be decoded into the requested shape.

    This signals a mismatch between what the caller expected and what the CLI
    printed, not a Terraform failure: the process itself exited successfully.
    """

    def __init__(self, diagnostic: str) -> None:
        self.diagnostic = diagnostic
        super().__init__(f"failed to decode terraform output: {diagnostic}")
