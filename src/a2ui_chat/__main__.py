"""a2ui-chat CLI entry point."""

from __future__ import annotations

from a2ui_chat.cli import app

if __name__ == "__main__":
    app()
