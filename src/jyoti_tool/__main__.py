"""Entry point for the Kivy app."""

from __future__ import annotations

from jyoti_tool.app import run_app


def main() -> int:
    """Run app entrypoint."""
    try:
        return run_app()
    except ImportError as exc:
        print(f"Could not start Kivy: {exc}")
        print("Install the GUI extra: pip install 'jyoti-tool[gui]'")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
