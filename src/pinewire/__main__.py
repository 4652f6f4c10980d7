"""Console-script entry point for :mod:`pinewire`."""

from __future__ import annotations

from pinewire.cli import create_app


def main() -> None:
    """Execute the CLI application.

    Example:
        >>> from pinewire.__main__ import main
        >>> main()  # doctest: +SKIP
    """

    app = create_app()
    app(prog_name="pinewire")


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()


__all__ = ["main"]
