from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from update_flake_lock.config.action_config import ActionConfig


NIX_EXECUTABLE = "nix"


@dataclass(frozen=True)
class NixInvocation:
    """
    A single, fully-built nix invocation.

    `args` excludes the executable; `cwd` is the flake directory (None means
    the current working directory of the run).
    """

    executable: str
    args: tuple[str, ...]
    cwd: Path | None = None

    def argv(self) -> list[str]:
        return [self.executable, *self.args]


def build_nix_command_args(
    nix_options: Sequence[str],
    flake_inputs: Sequence[str],
    commit_message: str,
) -> list[str]:
    """
    Build the argument vector for:

        nix ${nix options} flake lock ${--update-input <name>...} --commit-lock-file --commit-lock-file-summary <msg>

    Global options must precede the `flake` subcommand. Every input name gets
    its own `--update-input` flag; duplicates are passed through as-is. The
    commit message is always a single token, even when empty.
    """
    update_inputs: list[str] = []
    for name in flake_inputs:
        update_inputs.extend(["--update-input", name])

    return [
        *nix_options,
        "flake",
        "lock",
        *update_inputs,
        "--commit-lock-file",
        "--commit-lock-file-summary",
        commit_message,
    ]


def build_invocation(config: ActionConfig) -> NixInvocation:
    args = build_nix_command_args(config.nix_options, config.flake_inputs, config.commit_message)
    return NixInvocation(executable=NIX_EXECUTABLE, args=tuple(args), cwd=config.path_to_flake_dir)


def format_command(executable: str, args: Sequence[str]) -> str:
    # Debug rendering only; not safe to paste into a shell.
    return " ".join([executable, *args])


def format_shell_command(executable: str, args: Sequence[str]) -> str:
    return " ".join(shlex.quote(x) for x in [executable, *args])
