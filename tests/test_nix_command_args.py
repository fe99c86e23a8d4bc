from __future__ import annotations

import unittest
from pathlib import Path

from update_flake_lock.config.action_config import ActionConfig
from update_flake_lock.nix.command import (
    build_invocation,
    build_nix_command_args,
    format_command,
    format_shell_command,
)


class BuildNixCommandArgsTests(unittest.TestCase):
    def test_empty_inputs_yield_minimal_command(self) -> None:
        self.assertEqual(
            build_nix_command_args([], [], ""),
            ["flake", "lock", "--commit-lock-file", "--commit-lock-file-summary", ""],
        )

    def test_options_precede_subcommand_and_inputs_follow_it(self) -> None:
        args = build_nix_command_args(
            ["--extra-substituters", "https://example.com"],
            ["nixpkgs"],
            "updated flake.lock",
        )
        self.assertEqual(
            args,
            [
                "--extra-substituters",
                "https://example.com",
                "flake",
                "lock",
                "--update-input",
                "nixpkgs",
                "--commit-lock-file",
                "--commit-lock-file-summary",
                "updated flake.lock",
            ],
        )

    def test_documented_shapes_render_as_expected(self) -> None:
        self.assertEqual(
            format_command("nix", build_nix_command_args([], [], "updated flake.lock")),
            "nix flake lock --commit-lock-file --commit-lock-file-summary updated flake.lock",
        )
        self.assertEqual(
            format_command(
                "nix",
                build_nix_command_args(["--extra-substituters", "https://example.com"], ["nixpkgs"], "updated flake.lock"),
            ),
            "nix --extra-substituters https://example.com flake lock --update-input nixpkgs "
            "--commit-lock-file --commit-lock-file-summary updated flake.lock",
        )

    def test_each_input_gets_its_own_flag_in_order(self) -> None:
        names = ["nixpkgs", "home-manager", "flake-utils"]
        args = build_nix_command_args([], names, "m")
        start = args.index("lock") + 1
        update_part = args[start : start + 2 * len(names)]
        self.assertEqual(update_part[0::2], ["--update-input"] * len(names))
        self.assertEqual(update_part[1::2], names)
        self.assertEqual(args[start + 2 * len(names)], "--commit-lock-file")

    def test_duplicate_inputs_are_not_deduplicated(self) -> None:
        args = build_nix_command_args([], ["a", "a"], "m")
        self.assertEqual(args[2:6], ["--update-input", "a", "--update-input", "a"])

    def test_commit_message_is_a_single_trailing_token(self) -> None:
        msg = "fix: a b c; $(rm -rf /) 'quoted'"
        args = build_nix_command_args([], [], msg)
        self.assertEqual(args[-1], msg)
        self.assertEqual(args[-2], "--commit-lock-file-summary")
        self.assertEqual(args.count(msg), 1)

    def test_is_deterministic_and_does_not_mutate_inputs(self) -> None:
        opts = ["--option", "sandbox false"]
        names = ["nixpkgs"]
        first = build_nix_command_args(opts, names, "m")
        second = build_nix_command_args(opts, names, "m")
        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertEqual(opts, ["--option", "sandbox false"])
        self.assertEqual(names, ["nixpkgs"])

    def test_accepts_tuples(self) -> None:
        self.assertEqual(
            build_nix_command_args(("-L",), ("x",), "m"),
            ["-L", "flake", "lock", "--update-input", "x", "--commit-lock-file", "--commit-lock-file-summary", "m"],
        )


class InvocationTests(unittest.TestCase):
    def test_build_invocation_uses_nix_and_flake_dir(self) -> None:
        cfg = ActionConfig(
            commit_message="flake.lock: Update",
            flake_inputs=("nixpkgs",),
            nix_options=("-L",),
            path_to_flake_dir=Path("sub/dir"),
        )
        inv = build_invocation(cfg)
        self.assertEqual(inv.executable, "nix")
        self.assertEqual(inv.cwd, Path("sub/dir"))
        self.assertEqual(
            inv.argv(),
            [
                "nix",
                "-L",
                "flake",
                "lock",
                "--update-input",
                "nixpkgs",
                "--commit-lock-file",
                "--commit-lock-file-summary",
                "flake.lock: Update",
            ],
        )

    def test_shell_rendering_quotes_message(self) -> None:
        out = format_shell_command("nix", build_nix_command_args([], [], "updated flake.lock"))
        self.assertEqual(out, "nix flake lock --commit-lock-file --commit-lock-file-summary 'updated flake.lock'")


if __name__ == "__main__":
    unittest.main()
