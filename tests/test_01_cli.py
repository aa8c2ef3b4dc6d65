"""CLI tests for the exprvm entry point.

Test cases live in 01_cli/*.tests files. Format:

    === test name
    args: -e "1 + 2"
    ---
    exit: 0
    stdout: 3
    ---

The args line is split with shell quoting rules.

Assertion directives in the expected section:
    exit:             exact exit code
    stdout:           exact stdout content (trailing newline stripped)
    stdout-contains:  stdout must contain substring
    stdout-empty:     stdout must be empty
    stderr-contains:  stderr must contain substring
    stderr-empty:     stderr must be empty
"""

import os
import shlex
import subprocess
import sys
from pathlib import Path

import pytest
from spec_files import discover

CLI_DIR = Path(__file__).parent / "01_cli"
SRC_DIR = Path(__file__).parent.parent / "src"


def parse_cli_spec(test_input: str, expected: str) -> dict:
    """Turn the input and expected sections into a spec dict."""
    spec: dict = {"args": [], "assertions": []}
    first = test_input.split("\n")[0]
    if first.startswith("args:"):
        spec["args"] = shlex.split(first[5:])
    for line in expected.split("\n"):
        line = line.strip()
        if not line:
            continue
        directive, _, value = line.partition(":")
        value = value.strip()
        if directive == "exit":
            spec["assertions"].append(("exit", int(value)))
        elif directive in ("stdout-empty", "stderr-empty"):
            spec["assertions"].append((directive, None))
        elif directive in ("stdout", "stdout-contains", "stderr-contains"):
            spec["assertions"].append((directive, value))
        else:
            raise ValueError("unknown directive: " + directive)
    return spec


def run_cli(args: list[str]) -> subprocess.CompletedProcess[bytes]:
    """Run the exprvm CLI in a subprocess."""
    env = dict(os.environ)
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "exprvm", *args],
        capture_output=True,
        env=env,
    )


def check_assertions(
    result: subprocess.CompletedProcess[bytes], assertions: list[tuple]
) -> None:
    """Check all assertions against a CLI result."""
    stdout = result.stdout.decode(errors="replace")
    stderr = result.stderr.decode(errors="replace")
    for kind, value in assertions:
        if kind == "exit":
            assert result.returncode == value, (
                f"expected exit {value}, got {result.returncode}\nstderr: {stderr}"
            )
        elif kind == "stdout":
            assert stdout.rstrip("\n") == value, (
                f"expected stdout {value!r}, got {stdout!r}"
            )
        elif kind == "stdout-contains":
            assert value in stdout, (
                f"expected stdout to contain {value!r}, got {stdout!r}"
            )
        elif kind == "stdout-empty":
            assert stdout == "", f"expected empty stdout, got {stdout[:200]!r}"
        elif kind == "stderr-contains":
            assert value in stderr, (
                f"expected stderr to contain {value!r}, got {stderr!r}"
            )
        elif kind == "stderr-empty":
            assert stderr == "", f"expected empty stderr, got {stderr!r}"


def pytest_generate_tests(metafunc):
    """Parametrize test_cli over all .tests files."""
    if "cli_spec" in metafunc.fixturenames:
        params = [
            pytest.param(parse_cli_spec(test_input, expected), id=test_id)
            for test_id, test_input, expected in discover(CLI_DIR)
        ]
        metafunc.parametrize("cli_spec", params)


def test_cli(cli_spec: dict) -> None:
    """Run a single CLI test case from .tests file."""
    result = run_cli(cli_spec["args"])
    check_assertions(result, cli_spec["assertions"])


def test_main_returns_exit_code(capsys):
    from exprvm.cli import main

    assert main(["-e", "6 * 7"]) == 0
    assert capsys.readouterr().out == "42\n"
    assert main(["-e", "6 / 0"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("exprvm: division by zero:")


def test_main_long_flat_sum(capsys):
    from exprvm.cli import main

    source = "+".join(["1"] * 5000)
    assert main(["-e", source]) == 0
    captured = capsys.readouterr()
    assert captured.out == "5000\n"
    assert captured.err == ""
    assert main(["-a", "sexpr", source]) == 0
    assert capsys.readouterr().out.endswith(" 1)\n5000\n")
