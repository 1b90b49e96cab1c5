#!/usr/bin/env python3
"""
Run negative tests: every .code in examples/test_syntax_err/ must fail (syntax/semantic/runtime).
A `# error:` comment, when present, must appear in the reported error.
"""
import argparse
import os
import re
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
BASE = ROOT / "examples" / "test_syntax_err"


def read_comments(test_file: Path):
    """`# error:` text the failure must mention, and `# stdin:` lines fed to SCAN."""
    wanted = None
    stdin_lines = []
    for line in test_file.read_text().splitlines():
        m = re.match(r"^#\s*(error|stdin):\s?(.*)$", line)
        if not m:
            continue
        if m.group(1) == "error":
            wanted = m.group(2).strip()
        else:
            stdin_lines.append(m.group(2) + "\n")
    return wanted, "".join(stdin_lines)


def run_interpreter(test_file: Path) -> bool:
    wanted, stdin_text = read_comments(test_file)
    env = dict(os.environ, PYTHONPATH=str(ROOT / "py"), NO_COLOR="1")
    proc = subprocess.run(
        [sys.executable, "-m", "codelang", str(test_file)],
        input=stdin_text,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        env=env,
    )
    if proc.returncode == 0:
        print(f"[FAIL] {test_file.name} (unexpected success)")
        if proc.stdout.strip():
            print(f"  stdout: {proc.stdout.strip()}")
        return False

    if wanted and wanted not in proc.stderr:
        print(f"[FAIL] {test_file.name} (wrong error, wanted {wanted!r})")
        print(f"  stderr: {proc.stderr.strip()}")
        return False

    print(f"[PASS] {test_file.name} (expected failure)")
    if proc.stderr.strip():
        print(f"  stderr: {proc.stderr.strip()}")
    return True


def main():
    parser = argparse.ArgumentParser(description="Run negative .code tests that should fail.")
    parser.add_argument("--filter", help="Substring filter for test filenames", default="")
    args = parser.parse_args()

    tests = sorted(BASE.glob("*.code"))
    if args.filter:
        tests = [t for t in tests if args.filter in t.name]
    if not tests:
        print("No tests found.")
        return 0

    all_pass = True
    for t in tests:
        ok = run_interpreter(t)
        all_pass = all_pass and ok

    return 0 if all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
