from __future__ import annotations

import argparse


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Record subway announcements and transcribe them."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env). Use empty to disable.",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--file",
        default=None,
        help="Transcribe an existing audio file without opening the window.",
    )
    mode.add_argument(
        "--record",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Record from the microphone for SECONDS, then transcribe (no window).",
    )

    parser.add_argument(
        "--speak",
        action="store_true",
        help="In headless modes, read the transcript aloud after printing it.",
    )
    parser.add_argument(
        "--save-log",
        action="store_true",
        help="Write the session log to logs/ on exit.",
    )
    return parser.parse_args(argv)
