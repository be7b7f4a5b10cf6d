"""Run every example script and compare its stdout with the inline ``# =>`` comments.

Each ``examples/ex_*/01_*.py`` script prints one line per ``print`` call, and the
line holding the call's closing parenthesis documents the expected output after
``# =>``. Scripts run in dev mode with warnings turned into errors, so an
un-awaited coroutine or a leaked resource shows up on stderr and fails the run.
metawire never configures logging handlers, so a clean run writes nothing to
stderr.
"""

from __future__ import annotations

import ast
import os
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
EXAMPLES_ROOT = REPO_ROOT / "examples"
SRC_ROOT = REPO_ROOT / "src"
EXPECTATION_MARKER = "# =>"


def _example_scripts() -> list[Path]:
    scripts = sorted(EXAMPLES_ROOT.glob("ex_*/01_*.py"))
    topics = {script.parent for script in scripts}
    assert len(topics) == len(scripts), "each example topic holds exactly one 01_*.py script"
    return scripts


def _expected_stdout(script: Path) -> list[str]:
    source = script.read_text(encoding="utf-8")
    lines = source.splitlines()
    prints = sorted(
        (
            node
            for node in ast.walk(ast.parse(source, filename=str(script)))
            if isinstance(node, ast.Call)
            and isinstance(node.func, ast.Name)
            and node.func.id == "print"
        ),
        key=lambda node: (node.lineno, node.col_offset),
    )

    expected: list[str] = []
    for call in prints:
        closing_line = lines[(call.end_lineno or call.lineno) - 1]
        _, marker, output = closing_line.partition(EXPECTATION_MARKER)
        assert marker, f"{script}:{call.lineno}: print() needs a '{EXPECTATION_MARKER}' comment"
        expected.append(output.strip())
    return expected


def _run_python(*args: str, cwd: Path) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, (str(SRC_ROOT), env.get("PYTHONPATH"))))
    return subprocess.run(  # noqa: S603
        [sys.executable, "-X", "dev", "-W", "error", *args],
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )


@pytest.mark.parametrize(
    "script",
    _example_scripts(),
    ids=lambda script: script.parent.name,
)
def test_example_output_matches_comments(script: Path) -> None:
    completed = _run_python(str(script), cwd=script.parent)

    assert completed.returncode == 0, completed.stderr
    assert completed.stderr == ""
    assert completed.stdout.splitlines() == _expected_stdout(script)


def test_importing_metawire_installs_no_log_handlers() -> None:
    completed = _run_python(
        "-c",
        "import logging, metawire; print(logging.getLogger('metawire').handlers)",
        cwd=REPO_ROOT,
    )

    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.strip() == "[]"
    assert completed.stderr == ""
