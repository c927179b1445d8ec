"""Installation of pinned Terraform versions from source."""

import logging
import shutil
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from terraform_plugin_test.environment import env_mapping
from terraform_plugin_test.errors import InstallError
from terraform_plugin_test.process import execute
from terraform_plugin_test.resolver import TERRAFORM_BINARY
from terraform_plugin_test.settings import snapshot_environ

log = logging.getLogger(__name__)

TERRAFORM_MODULE = "github.com/hashicorp/terraform"


@dataclass(frozen=True, kw_only=True)
class TerraformInstallation:
    """A Terraform executable built into its own temporary directory."""

    root_dir: Path
    exec_path: Path

    def cleanup(self) -> None:
        """Remove the installation directory and everything in it."""
        shutil.rmtree(self.root_dir)


def module_version(version: str) -> str:
    """Map a Terraform release to the version query understood by go install.

    Releases are tagged with a leading "v", so "1.5.7" becomes "v1.5.7".
    Anything else, including "latest", is passed through unchanged.
    """
    if version[:1].isdigit():
        return f"v{version}"
    return version


def install_terraform(
    version: str, environ: Mapping[str, str] | None = None
) -> TerraformInstallation:
    """Download and build the given Terraform version with the Go toolchain.

    The executable and all of its dependencies are installed into a fresh
    temporary directory with its own GOPATH, module cache and build cache, so
    the build neither reads nor writes the ambient Go environment. A failed
    build removes its directory; a successful one is kept until
    TerraformInstallation.cleanup is called.

    Args:
        version: Release identifier (e.g. "1.5.7") or "latest"
        environ: Ambient environment; defaults to a snapshot of os.environ

    Returns:
        The installation, whose exec_path is not checked for existence

    Raises:
        InstallError: If the Go toolchain is missing or the build fails

    """
    ambient = snapshot_environ(environ)

    go_exec = shutil.which("go", path=ambient.get("PATH", ""))
    if go_exec is None:
        raise InstallError(
            "go executable not found", "the Go toolchain must be on PATH"
        )

    root_dir = Path(tempfile.mkdtemp(prefix="tftest-terraform"))
    go_bin = root_dir / "bin"

    env = env_mapping(
        [
            *(f"{name}={value}" for name, value in ambient.items()),
            f"GOPATH={root_dir}",
            f"GOBIN={go_bin}",
            f"GOMODCACHE={root_dir / 'pkg' / 'mod'}",
            f"GOCACHE={root_dir / 'cache'}",
            # module cache is read-only by default, which breaks cleanup
            "GOFLAGS=-modcacherw",
        ]
    )

    target = f"{TERRAFORM_MODULE}@{module_version(version)}"
    log.info("Installing terraform %s into %s", target, root_dir)

    try:
        outcome = execute(
            Path(go_exec),
            ["go", "install", target],
            cwd=root_dir,
            env=env,
        )
    except OSError as e:
        shutil.rmtree(root_dir, ignore_errors=True)
        raise InstallError(f"failed to start: {e}", "") from e

    if not outcome.success:
        shutil.rmtree(root_dir, ignore_errors=True)
        raise InstallError(outcome.exit_description, outcome.stderr)

    return TerraformInstallation(
        root_dir=root_dir,
        exec_path=go_bin / TERRAFORM_BINARY,
    )
