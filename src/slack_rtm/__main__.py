"""slack-rtm CLI bootstrap."""

from __future__ import annotations

from slack_rtm.cli import create_cli_app

app = create_cli_app()

if __name__ == "__main__":
    app()
