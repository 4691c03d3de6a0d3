"""Allow running testboard as a module: python -m testboard."""

from testboard.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
