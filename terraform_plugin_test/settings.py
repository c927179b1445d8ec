"""Environment variables that steer the harness."""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import ConfigDict, Field, field_validator

from terraform_plugin_test.models.base import Model

TERRAFORM_VERSION_VAR = "TF_ACC_TERRAFORM_VERSION"
TERRAFORM_PATH_VAR = "TF_ACC_TERRAFORM_PATH"
PREVIOUS_EXEC_VAR = "TFTEST_PREVIOUS_EXEC"
LOG_PATH_VAR = "TF_ACC_LOG_PATH"


class HarnessSettings(Model):
    """Snapshot of the harness-related variables from an ambient environment.

    An empty value is treated exactly like an unset variable, and every
    unrelated variable in the environment is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    terraform_version: str | None = Field(
        default=None,
        alias=TERRAFORM_VERSION_VAR,
        description="Terraform release to install from source, or 'latest'",
    )
    terraform_path: str | None = Field(
        default=None,
        alias=TERRAFORM_PATH_VAR,
        description="Explicit path to the terraform executable",
    )
    previous_exec: str | None = Field(
        default=None,
        alias=PREVIOUS_EXEC_VAR,
        description="Path to a previous plugin build for upgrade testing",
    )
    log_path: str | None = Field(
        default=None,
        alias=LOG_PATH_VAR,
        description="File receiving TRACE logs from every terraform run",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _empty_as_unset(cls, value: str | None) -> str | None:
        return value or None

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str] | None = None
    ) -> "HarnessSettings":
        """Parse the harness variables out of an environment mapping.

        Args:
            environ: Environment to read; defaults to a snapshot of os.environ

        Returns:
            The parsed settings

        """
        return cls.model_validate(dict(snapshot_environ(environ)))

    @property
    def previous_exec_path(self) -> Path | None:
        """Previous plugin build as a path, if configured."""
        return Path(self.previous_exec) if self.previous_exec else None


def snapshot_environ(environ: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return the given environment, or a copy of the process environment."""
    if environ is None:
        return dict(os.environ)
    return environ
