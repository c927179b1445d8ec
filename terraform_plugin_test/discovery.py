"""Automatic discovery of the harness configuration."""

import logging
import os
import shutil
import stat
import sys
from collections.abc import Mapping
from pathlib import Path

from terraform_plugin_test.errors import ConfigError, InstallError
from terraform_plugin_test.installer import install_terraform
from terraform_plugin_test.models.config import Config
from terraform_plugin_test.resolver import find_terraform
from terraform_plugin_test.settings import (
    PREVIOUS_EXEC_VAR,
    TERRAFORM_PATH_VAR,
    HarnessSettings,
    snapshot_environ,
)

log = logging.getLogger(__name__)


def discover_config(
    plugin_name: str,
    source_dir: Path,
    *,
    environ: Mapping[str, str] | None = None,
    current_plugin_exec: Path | None = None,
) -> Config:
    """Discover a reasonable test helper configuration from the environment.

    With TF_ACC_TERRAFORM_VERSION set, that Terraform version is installed
    from source. Otherwise an existing executable is located through
    TF_ACC_TERRAFORM_PATH or PATH. TFTEST_PREVIOUS_EXEC, when set, must name
    an existing regular file.

    Args:
        plugin_name: Name of the plugin under test
        source_dir: Root of the plugin sources and test fixtures
        environ: Environment to read; defaults to a snapshot of os.environ
        current_plugin_exec: Plugin build under test; defaults to the
            running program

    Returns:
        The discovered configuration

    Raises:
        ConfigError: If no usable configuration can be discovered

    """
    ambient = snapshot_environ(environ)
    settings = HarnessSettings.from_environ(ambient)

    install_dir: Path | None = None
    if settings.terraform_version:
        try:
            installation = install_terraform(settings.terraform_version, ambient)
        except InstallError as e:
            raise ConfigError(
                f"could not install Terraform version "
                f"{settings.terraform_version}: {e}"
            ) from e
        terraform_exec = installation.exec_path
        install_dir = installation.root_dir
    else:
        found = find_terraform(ambient)
        if found is None:
            raise ConfigError(
                "unable to find 'terraform' executable for testing; either place "
                f"it in PATH or set {TERRAFORM_PATH_VAR} explicitly to a direct "
                "executable path"
            )
        terraform_exec = found

    # subprocess resolves a relative executable against each run's cwd
    terraform_exec = terraform_exec.absolute()
    previous_exec = settings.previous_exec_path
    try:
        check_terraform_exec(terraform_exec)
        if previous_exec is not None:
            check_previous_exec(previous_exec)
    except ConfigError:
        if install_dir is not None:
            shutil.rmtree(install_dir, ignore_errors=True)
        raise

    log.info("Using terraform executable %s for plugin %s", terraform_exec, plugin_name)

    return Config(
        plugin_name=plugin_name,
        source_dir=source_dir,
        terraform_exec=terraform_exec,
        current_plugin_exec=current_plugin_exec or Path(sys.argv[0]),
        previous_plugin_exec=previous_exec,
        terraform_install_dir=install_dir,
    )


def check_terraform_exec(path: Path) -> None:
    """Ensure path is an existing, executable regular file."""
    try:
        is_file = path.is_file()
    except OSError as e:
        raise ConfigError(f"terraform executable {path} cannot be used: {e}") from e
    if not is_file:
        raise ConfigError(
            f"terraform executable {path} does not exist or is not a regular file"
        )
    if not os.access(path, os.X_OK):
        raise ConfigError(f"terraform executable {path} is not executable")


def check_previous_exec(path: Path) -> None:
    """Ensure the previous plugin build exists and is not a directory."""
    try:
        info = path.stat()
    except OSError as e:
        raise ConfigError(
            f"{PREVIOUS_EXEC_VAR} of {path} cannot be used: {e}"
        ) from e
    if stat.S_ISDIR(info.st_mode):
        raise ConfigError(f"{PREVIOUS_EXEC_VAR} of {path} is directory, not file")
