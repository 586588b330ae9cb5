from __future__ import annotations

import sys

import typer

from .main import app


def run(argv: list[str] | None = None) -> int:
    command = typer.main.get_command(app)
    try:
        command.main(
            args=list(sys.argv[1:] if argv is None else argv),
            prog_name="sitectl",
            standalone_mode=True,
        )
    except SystemExit as exc:
        code = exc.code
        if code is None:
            return 0
        if not isinstance(code, int):
            return 1
        # usage errors (unknown flag, missing value) exit 2; everything here is 0 or 1
        return 1 if code == 2 else code
    return 0


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
