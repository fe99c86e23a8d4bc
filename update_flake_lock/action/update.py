from __future__ import annotations

from update_flake_lock.config.action_config import ActionConfig
from update_flake_lock.nix.command import NIX_EXECUTABLE, build_invocation, format_command
from update_flake_lock.reporting.reporter import EVENT_EXECUTION_FAILURE, RunReporter
from update_flake_lock.runner.process import EXIT_NOT_FOUND, ExecutableNotFoundError, ProcessRunner, require_executable


class UpdateFlakeLockAction:
    def __init__(self, config: ActionConfig, runner: ProcessRunner, reporter: RunReporter) -> None:
        self._cfg = config
        self._runner = runner
        self._reporter = reporter

    def update(self) -> int:
        """
        Run `nix flake lock` once and report the outcome.

        Returns 0 on success, 1 on any failure. A flake directory that does
        not exist aborts the run before nix is started.
        """
        flake_dir = self._cfg.path_to_flake_dir
        if flake_dir is not None and not flake_dir.is_dir():
            self._reporter.record_event(EVENT_EXECUTION_FAILURE, {"returnCode": 1})
            self._reporter.report_fatal(
                f"Error when trying to cd into flake directory {flake_dir}. Make sure the check that the directory exists."
            )
            return 1

        try:
            require_executable(NIX_EXECUTABLE)
        except ExecutableNotFoundError as e:
            self._reporter.record_event(EVENT_EXECUTION_FAILURE, {"returnCode": EXIT_NOT_FOUND})
            self._reporter.report_fatal(str(e))
            return 1

        invocation = build_invocation(self._cfg)
        self._reporter.log_debug(f"running nix command:\n{format_command(invocation.executable, invocation.args)}")

        exit_code = self._runner.execute(invocation.executable, invocation.args, cwd=invocation.cwd)
        if exit_code != 0:
            self._reporter.record_event(EVENT_EXECUTION_FAILURE, {"exitCode": exit_code})
            self._reporter.report_fatal(f"non-zero exit code of {exit_code} detected")
            return 1

        self._reporter.log_info("flake.lock file was successfully updated")
        return 0
