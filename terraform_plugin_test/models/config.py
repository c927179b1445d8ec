"""Harness configuration shared by all working directories."""

import shutil
from pathlib import Path

from pydantic import Field

from terraform_plugin_test.models.base import Model


class Config(Model):
    """Configuration of the test helper.

    Normally produced by discover_config, but it can be built directly for
    more complex scenarios. A directly built Config is trusted as-is.
    """

    plugin_name: str = Field(..., description="Name of the plugin under test")
    source_dir: Path = Field(..., description="Root of plugin sources and fixtures")
    terraform_exec: Path = Field(..., description="Terraform CLI executable")
    current_plugin_exec: Path = Field(..., description="Plugin build under test")
    previous_plugin_exec: Path | None = Field(
        default=None, description="Prior plugin build for upgrade testing"
    )
    terraform_install_dir: Path | None = Field(
        default=None,
        description="Temporary directory Terraform was installed into, if any",
    )

    @property
    def has_previous_plugin(self) -> bool:
        """Whether a previous plugin build is configured."""
        return self.previous_plugin_exec is not None

    def remove_installation(self) -> None:
        """Remove the Terraform installed from source, if there is one."""
        if self.terraform_install_dir is not None:
            shutil.rmtree(self.terraform_install_dir)
