"""Motivational quotes used as the body of the daily quote reminder."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Quote:
    text: str
    author: Optional[str] = None


MOTIVATIONAL_QUOTES = [
    Quote("Every day is a fresh start. You've got this! \U0001F4AA", "Break Free"),
    Quote("Progress, not perfection. Every step forward counts. \U0001F31F", "Break Free"),
    Quote("You are stronger than your urges. Keep going! \U0001F49A", "Break Free"),
    Quote("One day at a time. You're building a better future. ✨", "Break Free"),
    Quote("Your past doesn't define you. Your actions today do. \U0001F3AF", "Break Free"),
    Quote("Every moment you choose recovery is a victory. \U0001F3C6", "Break Free"),
    Quote("Small steps lead to big changes. You're doing great! \U0001F331", "Break Free"),
    Quote("Your future self will thank you for today's choices. \U0001F64F", "Break Free"),
    Quote("Every urge resisted is a victory. You're winning! \U0001F38A", "Break Free"),
    Quote("The best time to start was yesterday. The second best time is now. ⏰", "Break Free"),
    Quote("Every small victory counts. Celebrate your progress! \U0001F388", "Break Free"),
    Quote("The path to freedom starts with a single step. You've taken many. \U0001F6B6", "Break Free"),
]


def random_quote(rng: random.Random | None = None) -> Quote:
    return (rng or random).choice(MOTIVATIONAL_QUOTES)


def quote_by_index(index: int) -> Quote:
    """Stable lookup that wraps around the catalog."""
    return MOTIVATIONAL_QUOTES[index % len(MOTIVATIONAL_QUOTES)]
