"""Tests for running terraform in a working directory."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import BaseModel

from terraform_plugin_test.errors import DecodeError, ProcessError
from terraform_plugin_test.working_dir import WorkingDir
from tests.conftest import MakeConfigFn, MakeExecutableFn


def parse_env_dump(path: Path) -> dict[str, str]:
    """Parse the output of `env` written by a fake terraform."""
    env: dict[str, str] = {}
    for line in path.read_text().splitlines():
        name, _, value = line.partition("=")
        env[name] = value
    return env


@pytest.fixture
def make_wd(
    make_executable: MakeExecutableFn,
    make_config: MakeConfigFn,
    base_dir: Path,
    environ: dict[str, str],
):
    """Return a function creating a WorkingDir around a fake terraform script."""

    def _make(script: str) -> WorkingDir:
        terraform = make_executable("terraform", script)
        return WorkingDir(
            config=make_config(terraform), base_dir=base_dir, environ=environ
        )

    return _make


class TestRun:
    """Tests for WorkingDir.run."""

    def test_succeeds_on_zero_exit(self, make_wd) -> None:
        """Returns None when terraform succeeds."""
        wd = make_wd("echo ignored; exit 0")

        assert wd.run("init") is None

    def test_passes_arguments(self, make_wd, base_dir: Path) -> None:
        """Forwards arguments to terraform unchanged."""
        wd = make_wd('printf "%s\\n" "$@" > args.txt')

        wd.run("plan", "-out=tfplan", "-var", "name=with space")

        assert (base_dir / "args.txt").read_text().splitlines() == [
            "plan",
            "-out=tfplan",
            "-var",
            "name=with space",
        ]

    def test_runs_in_base_dir(self, make_wd, base_dir: Path) -> None:
        """Runs terraform inside the working directory."""
        wd = make_wd("pwd > where.txt")

        wd.run("init")

        assert (base_dir / "where.txt").read_text().strip() == str(base_dir.resolve())

    def test_sets_invocation_environment(
        self, make_wd, base_dir: Path, environ: dict[str, str]
    ) -> None:
        """Disables logging and input while keeping the ambient variables."""
        environ["TF_LOG"] = "DEBUG"
        environ["AMBIENT_PROBE"] = "kept"
        wd = make_wd("env > env.txt")

        wd.run("init")

        env = parse_env_dump(base_dir / "env.txt")
        assert env["TF_LOG"] == ""
        assert env["TF_INPUT"] == "0"
        assert env["AMBIENT_PROBE"] == "kept"
        assert "TF_LOG_PATH" not in env

    def test_enables_trace_logging(
        self, make_wd, base_dir: Path, environ: dict[str, str], tmp_path: Path
    ) -> None:
        """TF_ACC_LOG_PATH turns on TRACE logging to that file."""
        log_path = tmp_path / "terraform.log"
        environ["TF_ACC_LOG_PATH"] = str(log_path)
        wd = make_wd("env > env.txt")

        wd.run("apply")

        env = parse_env_dump(base_dir / "env.txt")
        assert env["TF_LOG"] == "TRACE"
        assert env["TF_LOG_PATH"] == str(log_path)

    def test_raises_process_error_with_stderr(self, make_wd) -> None:
        """Includes the exit status and stderr verbatim on failure."""
        wd = make_wd("echo 'Error: Invalid provider configuration' >&2; exit 1")

        with pytest.raises(ProcessError) as exc_info:
            wd.run("plan")

        error = exc_info.value
        assert error.exit_description == "exit status 1"
        assert error.stderr == "Error: Invalid provider configuration\n"
        assert "Error: Invalid provider configuration" in str(error)
        assert str(error).startswith("terraform failed: exit status 1")

    def test_raises_process_error_when_terraform_missing(
        self, make_config: MakeConfigFn, base_dir: Path, tmp_path: Path
    ) -> None:
        """Reports a terraform executable that cannot be started."""
        wd = WorkingDir(
            config=make_config(tmp_path / "missing-terraform"),
            base_dir=base_dir,
            environ={},
        )

        with pytest.raises(ProcessError, match="failed to start"):
            wd.run("version")

    def test_uses_terraform_as_argv0(
        self, make_config: MakeConfigFn, base_dir: Path
    ) -> None:
        """Always passes "terraform" as argv[0], whatever the executable path."""
        config = make_config(Path("/opt/tools/terraform-1.5.7"))
        wd = WorkingDir(config=config, base_dir=base_dir, environ={})
        completed = subprocess.CompletedProcess(
            args=["terraform", "init"], returncode=0, stdout=None, stderr=b""
        )

        with patch(
            "terraform_plugin_test.process.subprocess.run", return_value=completed
        ) as run_mock:
            wd.run("init")

        args, kwargs = run_mock.call_args
        assert args[0] == ["terraform", "init"]
        assert kwargs["executable"] == Path("/opt/tools/terraform-1.5.7")
        assert kwargs["cwd"] == base_dir
        assert kwargs["env"] == {"TF_LOG": "", "TF_INPUT": "0"}
        assert kwargs["stdout"] is subprocess.DEVNULL


class TestRunJson:
    """Tests for WorkingDir.run_json."""

    def test_decodes_generic_json(self, make_wd) -> None:
        """Decodes stdout into plain JSON values by default."""
        wd = make_wd("""printf '{"a":1}'""")

        assert wd.run_json("show", "-json") == {"a": 1}

    def test_decodes_into_model(self, make_wd) -> None:
        """Validates stdout against a pydantic model."""

        class Version(BaseModel):
            terraform_version: str
            provider_selections: dict[str, str]

        wd = make_wd(
            """printf '{"terraform_version":"1.5.7","provider_selections":{}}'"""
        )

        version = wd.run_json("version", "-json", target=Version)

        assert version == Version(terraform_version="1.5.7", provider_selections={})

    def test_raises_decode_error_on_malformed_output(self, make_wd) -> None:
        """Malformed stdout is a decode error, not a process error."""
        wd = make_wd("printf '{a:'")

        with pytest.raises(DecodeError) as exc_info:
            wd.run_json("show", "-json")

        assert not isinstance(exc_info.value, ProcessError)
        assert exc_info.value.diagnostic

    def test_raises_decode_error_on_empty_output(self, make_wd) -> None:
        """Empty stdout cannot be decoded."""
        wd = make_wd("exit 0")

        with pytest.raises(DecodeError):
            wd.run_json("show", "-json")

    def test_raises_decode_error_on_shape_mismatch(self, make_wd) -> None:
        """Valid JSON of the wrong shape is a decode error."""
        wd = make_wd("""printf '[1, 2, 3]'""")

        with pytest.raises(DecodeError):
            wd.run_json("show", "-json", target=dict[str, int])

    def test_raises_process_error_before_decoding(self, make_wd) -> None:
        """A failing terraform is reported as a process error even with output."""
        wd = make_wd("""printf '{"a":1}'; echo 'boom' >&2; exit 2""")

        with pytest.raises(ProcessError) as exc_info:
            wd.run_json("show", "-json")

        assert exc_info.value.exit_description == "exit status 2"
        assert exc_info.value.stderr == "boom\n"

    def test_keeps_stderr_out_of_decoded_output(self, make_wd) -> None:
        """Warnings on stderr do not disturb decoding."""
        wd = make_wd("""echo 'Warning: deprecated' >&2; printf '{"ok":true}'""")

        assert wd.run_json("output", "-json") == {"ok": True}


def test_path_joins_under_base_dir(
    make_config: MakeConfigFn, base_dir: Path, tmp_path: Path
) -> None:
    """Builds paths inside the working directory."""
    wd = WorkingDir(config=make_config(tmp_path / "terraform"), base_dir=base_dir)

    assert wd.path("terraform.tfstate") == base_dir / "terraform.tfstate"
    assert wd.path("modules", "child") == base_dir / "modules" / "child"
