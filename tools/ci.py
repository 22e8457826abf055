#!/usr/bin/env python3
# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the StyleBatch CI checks locally.

Pass ``--quick`` to run only the lint and test steps.
"""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str], bool]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"], False),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"], True),
    ("Type check", ["uv", "run", "ty", "check", "src/"], False),
    ("Tests", ["uv", "run", "pytest", "--cov=stylebatch", "--cov-report=term-missing"], True),
    ("Package", ["uv", "build"], False),
]
"""(name, command, part of the quick run)"""


def main(argv: list[str]) -> int:
    """Run the selected CI steps and print a summary."""
    quick = "--quick" in argv
    selected = [(name, cmd) for name, cmd, in_quick in STEPS if in_quick or not quick]

    results: list[tuple[str, int, float]] = []
    for name, cmd in selected:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        results.append((name, proc.returncode, time.monotonic() - start))

    _banner("Summary")
    for name, returncode, elapsed in results:
        if returncode == 0:
            print(chalk.green(f"  PASS  {name} ({elapsed:.1f}s)"))
        else:
            print(chalk.red(f"  FAIL  {name} ({elapsed:.1f}s, exit code {returncode})"))
    print()
    return 0 if all(returncode == 0 for _, returncode, _ in results) else 1


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}\n{chalk.blue(title)}\n{sep}")


def _repo_root() -> str:
    return str(pathlib.Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
