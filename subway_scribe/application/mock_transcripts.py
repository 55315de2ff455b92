from __future__ import annotations

import random

SUBWAY_ANNOUNCEMENTS: tuple[str, ...] = (
    "The next train to downtown will arrive in 3 minutes.",
    "Please stand clear of the closing doors.",
    "This train is now departing. Thank you for riding with us.",
    "Attention passengers, there is a 10 minute delay on the red line.",
    "Please keep your belongings with you at all times.",
    "The station is now closing. Please exit the platform.",
    "Service has been restored on the blue line.",
    "Please use the stairs or elevator to access the platform.",
    "This is a reminder to validate your ticket before boarding.",
    "The train is now approaching the platform.",
)


def pick_mock_transcript(rng: random.Random) -> str:
    return rng.choice(SUBWAY_ANNOUNCEMENTS)
