"""Working directories in which the Terraform CLI is run."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from terraform_plugin_test.environment import build_env, env_mapping
from terraform_plugin_test.errors import DecodeError, ProcessError
from terraform_plugin_test.models.config import Config
from terraform_plugin_test.process import ProcessOutcome, execute
from terraform_plugin_test.resolver import TERRAFORM_BINARY

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, kw_only=True)
class WorkingDir:
    """A directory bound to a harness configuration.

    Each test (or test phase) should use its own base_dir: Terraform writes
    state and lock files there, and working directories sharing one would
    observe each other's files. Creating and removing base_dir is up to the
    caller.
    """

    config: Config
    base_dir: Path
    environ: Mapping[str, str] | None = field(default=None, repr=False)

    def path(self, *parts: str) -> Path:
        """Return a path inside the working directory."""
        return self.base_dir.joinpath(*parts)

    def run(self, *args: str) -> None:
        """Run Terraform with the given arguments.

        Raises:
            ProcessError: If Terraform exits unsuccessfully

        """
        self._execute(args, capture_stdout=False)

    def run_json(self, *args: str, target: type[T] | Any = Any) -> T:
        """Run Terraform and decode its stdout as JSON into the target type.

        Args:
            args: Arguments passed to Terraform
            target: Type to validate the output against; any type pydantic
                understands, defaulting to a plain JSON value

        Returns:
            The decoded output

        Raises:
            ProcessError: If Terraform exits unsuccessfully
            DecodeError: If the output does not decode into target

        """
        outcome = self._execute(args, capture_stdout=True)
        stdout = outcome.stdout or b""
        try:
            return TypeAdapter(target).validate_json(stdout)
        except ValidationError as e:
            raise DecodeError(str(e)) from e

    def _execute(
        self, args: tuple[str, ...], *, capture_stdout: bool
    ) -> ProcessOutcome:
        env = env_mapping(build_env(self.environ))
        try:
            outcome = execute(
                self.config.terraform_exec,
                [TERRAFORM_BINARY, *args],
                cwd=self.base_dir,
                env=env,
                capture_stdout=capture_stdout,
            )
        except OSError as e:
            raise ProcessError(f"failed to start: {e}", "") from e

        if not outcome.success:
            raise ProcessError(outcome.exit_description, outcome.stderr)

        return outcome
