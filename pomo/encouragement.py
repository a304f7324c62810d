"""Short messages shown between periods."""

from __future__ import annotations

import random

_BREAK_TIPS: list[str] = [
    "Stand up and walk to the nearest window.",
    "Roll your wrists and unclench your jaw.",
    "Refill your glass before the next round.",
    "Let your eyes rest on the horizon for a bit.",
    "Leave the inbox alone until the break is over.",
    "A short walk around the room counts.",
]

_WORK_NUDGES: list[str] = [
    "Pick one thing to finish before the next bell.",
    "Close the tabs you will not need for this round.",
    "One period is short. Begin with the first line.",
    "Write down the very next step, then do it.",
    "Phone face down, notifications off.",
]


def get_break_message() -> str:
    """Return a calming message for break time."""
    return random.choice(_BREAK_TIPS)


def get_nudge() -> str:
    """Return a message for getting back to work."""
    return random.choice(_WORK_NUDGES)
