from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path

from update_flake_lock.action.update import UpdateFlakeLockAction
from update_flake_lock.config.action_config import ActionConfig, ConfigError, split_comma_separated
from update_flake_lock.nix.command import build_invocation, format_shell_command
from update_flake_lock.reporting.reporter import RunReporter
from update_flake_lock.runner.process import ProcessRunner


def _add_input_overrides(p: argparse.ArgumentParser) -> None:
    p.add_argument("--commit-msg", default=None, help="Commit summary (default: INPUT_COMMIT-MSG, or 'flake.lock: Update' when that is unset)")
    p.add_argument("--inputs", default=None, help="Comma-separated flake inputs to update (default: all inputs)")
    p.add_argument("--nix-options", default=None, help="Comma-separated options passed to nix before `flake lock`")
    p.add_argument("--path-to-flake-dir", default=None, help="Directory containing flake.nix (default: cwd)")
    p.add_argument("--events-path", default=None, help="Append telemetry events to this JSONL file")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="update-flake-lock")
    sub = parser.add_subparsers(dest="cmd")

    p_run = sub.add_parser("run", help="Run `nix flake lock` and commit the updated flake.lock (default)")
    _add_input_overrides(p_run)

    p_show = sub.add_parser("show-command", help="Print the nix command that `run` would execute")
    _add_input_overrides(p_show)
    p_show.add_argument("--json", action="store_true", help="Emit the invocation as JSON")

    # `run` is the default subcommand.
    if not argv or (argv[0].startswith("-") and argv[0] not in ("-h", "--help")):
        argv = ["run", *argv]
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> ActionConfig:
    cfg = ActionConfig.from_env()
    overrides: dict[str, object] = {}
    if args.commit_msg is not None:
        overrides["commit_message"] = args.commit_msg
    if args.inputs is not None:
        overrides["flake_inputs"] = tuple(split_comma_separated(args.inputs))
    if args.nix_options is not None:
        overrides["nix_options"] = tuple(split_comma_separated(args.nix_options))
    if args.path_to_flake_dir is not None:
        overrides["path_to_flake_dir"] = Path(args.path_to_flake_dir) if args.path_to_flake_dir.strip() else None
    if args.events_path is not None:
        overrides["events_path"] = Path(args.events_path) if args.events_path.strip() else None
    if not overrides:
        return cfg
    cfg = dataclasses.replace(cfg, **overrides)
    cfg.validate()
    return cfg


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    args = _parse_args(argv)

    try:
        cfg = _load_config(args)
    except ConfigError as e:
        RunReporter().report_fatal(str(e))
        return 1

    if args.cmd == "show-command":
        invocation = build_invocation(cfg)
        obj = {
            "argv": invocation.argv(),
            "cwd": str(invocation.cwd) if invocation.cwd is not None else None,
            "config": cfg.to_json_obj(),
        }
        if args.json:
            print(json.dumps(obj, ensure_ascii=False, indent=2))
        else:
            print(format_shell_command(invocation.executable, invocation.args))
        return 0

    reporter = RunReporter(events_path=cfg.events_path)
    action = UpdateFlakeLockAction(cfg, ProcessRunner(), reporter)
    return action.update()


if __name__ == "__main__":
    raise SystemExit(main())
