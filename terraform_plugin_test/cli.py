"""CLI entry point for the Terraform plugin test harness."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from terraform_plugin_test.discovery import discover_config
from terraform_plugin_test.errors import ConfigError, HarnessError
from terraform_plugin_test.working_dir import WorkingDir


def discover(plugin_name: str, source_dir: Path) -> int:
    """Print the discovered configuration and return exit code."""
    log = logging.getLogger("terraform_plugin_test")

    try:
        config = discover_config(plugin_name, source_dir)
    except ConfigError as e:
        log.error("Configuration discovery failed: %s", e)
        return 1

    print(config.model_dump_json(indent=2))
    return 0


def run(
    plugin_name: str,
    source_dir: Path,
    working_dir: Path,
    terraform_args: Sequence[str],
    *,
    decode_json: bool = False,
) -> int:
    """Run Terraform in a working directory and return exit code."""
    log = logging.getLogger("terraform_plugin_test")

    try:
        config = discover_config(plugin_name, source_dir)
        wd = WorkingDir(config=config, base_dir=working_dir)

        log.info("Running terraform %s in %s", " ".join(terraform_args), working_dir)
        if decode_json:
            print(json.dumps(wd.run_json(*terraform_args), indent=2))
        else:
            wd.run(*terraform_args)
    except HarnessError as e:
        log.error("%s", e)
        return 1

    return 0


def strip_separator(args: Sequence[str]) -> Sequence[str]:
    """Drop the leading "--" separating harness options from Terraform's."""
    if args and args[0] == "--":
        return args[1:]
    return args


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Drive the Terraform CLI for plugin acceptance tests"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    discover_parser = subparsers.add_parser(
        "discover", help="Print the discovered harness configuration"
    )
    run_parser = subparsers.add_parser(
        "run", help="Run terraform in a working directory"
    )
    for sub in (discover_parser, run_parser):
        sub.add_argument(
            "--plugin-name",
            required=True,
            help="Name of the plugin under test",
        )
        sub.add_argument(
            "--source-dir",
            type=Path,
            default=Path.cwd(),
            help="Root of the plugin sources (default: current directory)",
        )

    run_parser.add_argument(
        "--working-dir",
        type=Path,
        required=True,
        help="Directory to run terraform in",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Decode terraform stdout as JSON and print it",
    )
    run_parser.add_argument(
        "terraform_args",
        nargs=argparse.REMAINDER,
        help="Arguments passed to terraform, after --",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.command == "discover":
        exit_code = discover(args.plugin_name, args.source_dir)
    else:
        exit_code = run(
            args.plugin_name,
            args.source_dir,
            args.working_dir,
            strip_separator(args.terraform_args),
            decode_json=args.json,
        )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
