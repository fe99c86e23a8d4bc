from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping


DEFAULT_COMMIT_MESSAGE = "flake.lock: Update"
EVENTS_PATH_ENV = "UPDATE_FLAKE_LOCK_EVENTS_PATH"


class ConfigError(ValueError):
    pass


def input_env_name(name: str) -> str:
    # Same mapping as @actions/core: spaces become underscores, hyphens are kept.
    return "INPUT_" + name.replace(" ", "_").upper()


def _env(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if env is None else env


def get_string(name: str, env: Mapping[str, str] | None = None) -> str:
    return (_env(env).get(input_env_name(name)) or "").strip()


def get_optional_string(name: str, env: Mapping[str, str] | None = None) -> str | None:
    value = get_string(name, env)
    return value or None


def get_comma_separated_list(name: str, allow_empty: bool, env: Mapping[str, str] | None = None) -> list[str]:
    items = split_comma_separated(get_string(name, env))
    if not items and not allow_empty:
        raise ConfigError(f"Input required and not supplied: {name}")
    return items


def get_commit_message(env: Mapping[str, str] | None = None) -> str:
    # The action always sets the input (action.yml has a default), so a blank
    # value is deliberate and is passed to nix as-is.
    if input_env_name("commit-msg") not in _env(env):
        return DEFAULT_COMMIT_MESSAGE
    return get_string("commit-msg", env)


def split_comma_separated(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _check_tokens(label: str, tokens: tuple[str, ...]) -> list[str]:
    problems: list[str] = []
    for i, tok in enumerate(tokens):
        if "\x00" in tok:
            problems.append(f"{label}[{i}] contains a NUL character")
    return problems


@dataclass(frozen=True)
class ActionConfig:
    commit_message: str
    flake_inputs: tuple[str, ...] = ()
    nix_options: tuple[str, ...] = ()
    path_to_flake_dir: Path | None = None
    events_path: Path | None = None

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "ActionConfig":
        src = _env(env)
        flake_dir = get_optional_string("path-to-flake-dir", src)
        events_path = (src.get(EVENTS_PATH_ENV) or "").strip()
        cfg = ActionConfig(
            commit_message=get_commit_message(src),
            flake_inputs=tuple(get_comma_separated_list("inputs", True, src)),
            nix_options=tuple(get_comma_separated_list("nix-options", True, src)),
            path_to_flake_dir=Path(flake_dir) if flake_dir else None,
            events_path=Path(events_path) if events_path else None,
        )
        cfg.validate()
        return cfg

    def validate(self) -> None:
        problems = _check_tokens("inputs", self.flake_inputs) + _check_tokens("nix-options", self.nix_options)
        if "\x00" in self.commit_message:
            problems.append("commit-msg contains a NUL character")
        if problems:
            raise ConfigError("Invalid update-flake-lock configuration:\n" + "\n".join(problems))

    def to_json_obj(self) -> dict[str, Any]:
        return {
            "commit_message": self.commit_message,
            "flake_inputs": list(self.flake_inputs),
            "nix_options": list(self.nix_options),
            "path_to_flake_dir": str(self.path_to_flake_dir) if self.path_to_flake_dir is not None else None,
            "events_path": str(self.events_path) if self.events_path is not None else None,
        }
