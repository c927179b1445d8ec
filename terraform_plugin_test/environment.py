"""Construction of the process environment for Terraform invocations."""

from collections.abc import Mapping, Sequence

from terraform_plugin_test.settings import HarnessSettings, snapshot_environ


def build_env(environ: Mapping[str, str] | None = None) -> list[str]:
    """Build the environment entries for a single Terraform invocation.

    The ambient environment is copied as-is and then overridden by appending
    entries, so a name may appear more than once and the last entry wins.
    TF_LOG is cleared so that logging cannot pollute captured stderr, and
    TF_INPUT is disabled so Terraform never waits on a prompt. When
    TF_ACC_LOG_PATH is set, TRACE logging is sent to that file instead.

    Args:
        environ: Ambient environment; defaults to a snapshot of os.environ

    Returns:
        Ordered NAME=VALUE entries

    """
    ambient = snapshot_environ(environ)
    env = [f"{name}={value}" for name, value in ambient.items()]

    env.append("TF_LOG=")
    env.append("TF_INPUT=0")

    settings = HarnessSettings.from_environ(ambient)
    if settings.log_path:
        env.append("TF_LOG=TRACE")
        env.append(f"TF_LOG_PATH={settings.log_path}")

    return env


def env_mapping(entries: Sequence[str]) -> dict[str, str]:
    """Collapse NAME=VALUE entries into a mapping, letting later entries win."""
    env: dict[str, str] = {}
    for entry in entries:
        name, _, value = entry.partition("=")
        env[name] = value
    return env
