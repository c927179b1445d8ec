"""Lookup of an already-installed Terraform CLI executable."""

import shutil
from collections.abc import Mapping
from pathlib import Path

from terraform_plugin_test.settings import HarnessSettings, snapshot_environ

TERRAFORM_BINARY = "terraform"


def find_terraform(environ: Mapping[str, str] | None = None) -> Path | None:
    """Find a Terraform CLI executable for plugin testing.

    TF_ACC_TERRAFORM_PATH wins when set and is returned without any check, so
    a bad value only shows up once Terraform is actually run. Otherwise PATH
    is searched for a program named "terraform".

    Args:
        environ: Environment to consult; defaults to a snapshot of os.environ

    Returns:
        Absolute path to the executable, or None if none could be found

    """
    ambient = snapshot_environ(environ)
    settings = HarnessSettings.from_environ(ambient)
    if settings.terraform_path:
        return Path(settings.terraform_path)

    found = shutil.which(TERRAFORM_BINARY, path=ambient.get("PATH", ""))
    if found is None:
        return None
    return Path(found).absolute()
