"""Shared fixtures for harness tests."""

from pathlib import Path
from typing import Protocol

import pytest

from terraform_plugin_test.models.config import Config
from terraform_plugin_test.testing.factories import ConfigFactory

SYSTEM_PATH = "/usr/bin:/bin"


class MakeExecutableFn(Protocol):
    """Protocol for fake executable creation function."""

    def __call__(self, name: str, script: str) -> Path:
        """Write a shell script into the fake bin directory and return its path."""


class MakeConfigFn(Protocol):
    """Protocol for config creation function."""

    def __call__(self, terraform_exec: Path) -> Config:
        """Build a Config using the given terraform executable."""


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Create a directory for fake executables."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def make_executable(bin_dir: Path) -> MakeExecutableFn:
    """Return a function creating executable shell scripts in bin_dir."""

    def _make(name: str, script: str) -> Path:
        path = bin_dir / name
        path.write_text(f"#!/bin/sh\n{script}\n")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def make_config() -> MakeConfigFn:
    """Return a function building a Config around a terraform executable."""

    def _make(terraform_exec: Path) -> Config:
        return ConfigFactory.build(terraform_exec=terraform_exec)

    return _make


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Create an empty working directory."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def environ(bin_dir: Path) -> dict[str, str]:
    """Synthetic ambient environment with the fake bin directory on PATH."""
    return {"PATH": f"{bin_dir}:{SYSTEM_PATH}", "HOME": "/nonexistent"}
