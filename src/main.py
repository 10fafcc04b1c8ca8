"""Entry point for the `pomo` command (also run by the auto-stop process)."""

from cli import app


def main() -> None:
    """Run the focus-session CLI."""
    app(prog_name="pomo")


if __name__ == "__main__":
    main()
