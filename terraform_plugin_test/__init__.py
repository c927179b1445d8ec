"""Helpers for driving the Terraform CLI against a provider plugin under test."""

from terraform_plugin_test.discovery import discover_config
from terraform_plugin_test.errors import (
    ConfigError,
    DecodeError,
    HarnessError,
    InstallError,
    ProcessError,
)
from terraform_plugin_test.models.config import Config
from terraform_plugin_test.working_dir import WorkingDir

__all__ = [
    "Config",
    "ConfigError",
    "DecodeError",
    "HarnessError",
    "InstallError",
    "ProcessError",
    "WorkingDir",
    "discover_config",
]
