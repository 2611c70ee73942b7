"""`python -m influbuddy` entry point."""

from __future__ import annotations

import sys

# Windows terminals may default to cp1252, which cannot print the report emoji.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from influbuddy.cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
