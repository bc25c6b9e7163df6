#!/usr/bin/env python3
"""
Run the novelgender CI checks locally inside the ACTIVE virtual environment.

Steps, in CI order:
  1) sync   uv sync --all-extras (add --frozen when uv.lock exists)
  2) black  --check --line-length 120 on novelgender/, tests/ and scripts/
  3) mypy   novelgender/ and scripts/ with --ignore-missing-imports
  4) pytest tests/ with coverage of novelgender, PYTHONPATH set to the repo root

Every command runs from the directory holding pyproject.toml, wherever the script is
launched from. Use --skip to leave out steps, e.g. `--skip sync black`.
"""

import argparse
import os
import shutil
import subprocess
import sys
from pathlib import Path

BLACK_VERSION = "24.8.0"
LINE_LENGTH = "120"
STEPS = ("sync", "black", "mypy", "pytest")


def find_repo_root() -> Path:
    here = Path(__file__).resolve().parent
    for candidate in [here] + list(here.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return here.parent


REPO = find_repo_root()


def uv_command() -> list[str]:
    uv_path = shutil.which("uv")
    if uv_path:
        return [uv_path]
    print("ERROR: 'uv' not found on PATH. Install uv first.", file=sys.stderr)
    sys.exit(2)


def run(cmd: list[str], env: dict[str, str] | None = None) -> None:
    print(">>>", " ".join(cmd))
    subprocess.run(cmd, check=True, cwd=str(REPO), env=env)


def sync() -> None:
    args = ["sync", "--active", "--all-extras"]
    if (REPO / "uv.lock").exists():
        args.append("--frozen")
    run(uv_command() + args)


def black(targets: list[str]) -> None:
    uvx_path = shutil.which("uvx")
    if uvx_path:
        run([uvx_path, "--from", f"black=={BLACK_VERSION}", "black", *targets, "--check", "--line-length", LINE_LENGTH])
    else:
        run([sys.executable, "-m", "black", *targets, "--check", "--line-length", LINE_LENGTH])


def mypy(targets: list[str]) -> None:
    run(uv_command() + ["run", "--active", "mypy", *targets, "--ignore-missing-imports"])


def pytest(cov_fail_under: int) -> None:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(REPO)
    run(
        uv_command()
        + [
            "run",
            "--active",
            "pytest",
            "tests/",
            "--cov=novelgender",
            "--cov-report=term-missing",
            f"--cov-fail-under={cov_fail_under}",
        ],
        env=env,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Run novelgender CI checks locally.")
    parser.add_argument("--skip", nargs="*", choices=STEPS, default=[], help="Steps to leave out.")
    parser.add_argument("--cov-fail-under", type=int, default=80, help="Minimum total coverage percentage.")
    args = parser.parse_args()

    scripts = [str(path.relative_to(REPO)) for path in sorted((REPO / "scripts").glob("*.py"))]

    if "sync" not in args.skip:
        sync()
    if "black" not in args.skip:
        black(["novelgender", "tests"] + scripts)
    if "mypy" not in args.skip:
        mypy(["novelgender"] + scripts)
    if "pytest" not in args.skip:
        pytest(args.cov_fail_under)

    print("\nALL CHECKS PASSED")


if __name__ == "__main__":
    try:
        main()
    except subprocess.CalledProcessError as e:
        print(f"\nCommand failed with exit code {e.returncode}", file=sys.stderr)
        sys.exit(e.returncode)
