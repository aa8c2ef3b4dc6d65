"""Reader for the `.tests` case files shared by the table-driven tests.

Format:

    === test name
    input lines
    ---
    expected lines
    ---
"""

from pathlib import Path


def parse_spec_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse a .tests file into (name, input, expected) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


def discover(directory: Path) -> list[tuple[str, str, str]]:
    """Find all cases in a directory, returns (test_id, input, expected)."""
    results = []
    for test_file in sorted(directory.glob("*.tests")):
        for name, test_input, expected in parse_spec_file(test_file):
            results.append((f"{test_file.stem}/{name}", test_input, expected))
    return results
