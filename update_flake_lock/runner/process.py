from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Sequence


EXIT_NOT_FOUND = 127


class ExecutableNotFoundError(RuntimeError):
    pass


def require_executable(name: str, path: str | None = None) -> str:
    found = shutil.which(name, path=path)
    if found is None:
        raise ExecutableNotFoundError(f"`{name}` was not found on PATH; install it before running update-flake-lock")
    return found


class ProcessRunner:
    """
    Runs one external command to completion and returns its exit code.

    Arguments are passed as a list (no shell), so tokens with whitespace or
    shell metacharacters reach the child unchanged. Output is inherited so it
    lands in the CI log as-is.
    """

    def __init__(self, env: dict[str, str] | None = None) -> None:
        self._env = env

    def execute(self, executable: str, args: Sequence[str], cwd: Path | None = None) -> int:
        env = None
        if self._env is not None:
            env = {**os.environ, **self._env}
        try:
            proc = subprocess.run(
                [executable, *args],
                cwd=str(cwd) if cwd is not None else None,
                env=env,
                stdin=subprocess.DEVNULL,
                check=False,
            )
        except FileNotFoundError:
            # Either the executable or the cwd is missing.
            if cwd is not None and not Path(cwd).is_dir():
                return 1
            return EXIT_NOT_FOUND
        except OSError:
            return 1
        return proc.returncode
