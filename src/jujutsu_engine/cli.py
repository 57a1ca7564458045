"""Command-line entry point: open the log view or forward arguments to jj."""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from dataclasses import replace
from typing import List, Optional, Sequence

from jujutsu_engine.config import ConfigError, EngineConfig, load_config
from jujutsu_engine.runtime import telemetry

LOG_COMMANDS = ([], ["log"])


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Split ``argv`` into this tool's options and the arguments meant for jj.

    Options this parser does not know (``--no-pager``, ``--ignore-working-copy``)
    belong to jj and are kept in front of ``command``. Everything after the
    first ``--`` goes to jj untouched.
    """

    parser = argparse.ArgumentParser(
        prog="jujutsu-engine",
        description="Interactive jj log. Any other arguments are passed to jj.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--revset",
        default=None,
        help="Revset shown by the log view (default: jj's own default)",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get("JUJUTSU_ENGINE_CONFIG"),
        help="Path to a TOML config file",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="telelog preset for diagnostics",
    )
    parser.add_argument(
        "-R",
        "--repository",
        default=None,
        help="Repository directory (default: current directory)",
    )
    parser.add_argument("command", nargs=argparse.REMAINDER, help="jj arguments")

    argv = list(sys.argv[1:] if argv is None else argv)
    passthrough: List[str] = []
    if "--" in argv:
        split = argv.index("--")
        argv, passthrough = argv[:split], argv[split + 1 :]
    args, unknown = parser.parse_known_args(argv)
    command = [*unknown, *args.command]
    if command and passthrough:
        # `jj diff -- path` keeps its own separator.
        command.append("--")
    args.command = [*command, *passthrough]
    return args


def forward(config: EngineConfig, command: List[str], *, cwd: Optional[str] = None) -> int:
    """Run ``jj <command>`` attached to this terminal and return its exit status."""

    argv = [config.jj_binary, *command]
    telemetry.record_event("cli.forward", level="debug", data={"argv": argv})
    try:
        return subprocess.run(argv, cwd=cwd, check=False).returncode
    except FileNotFoundError:
        print(f"{config.jj_binary}: command not found", file=sys.stderr)
        return 127


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    opens_view = args.command in LOG_COMMANDS
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    elif opens_view:
        # The log view owns the terminal.
        telemetry.configure(settings=replace(telemetry.LogSettings.from_env(), console=False))
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"jujutsu-engine: {exc}", file=sys.stderr)
        return 2

    if not opens_view:
        return forward(config, args.command, cwd=args.repository)

    # Textual is only needed for the interactive view.
    from jujutsu_engine.adapters.textual.app import run_app

    run_app(config, revset=args.revset, cwd=args.repository)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry
    sys.exit(main())
