"""Presentation helpers for names and greetings."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass
class Greeting:
    greeting: str
    subtitle: str


def format_display_name(first_name: str | None, last_name: str | None, email: str | None) -> str:
    """Return ``First L.``, ``First``, a capitalized email prefix, or ``User``."""
    first = (first_name or "").strip()
    last = (last_name or "").strip()
    if first:
        if last:
            return f"{first} {last[0].upper()}."
        return first

    if email and "@" in email:
        prefix = email.split("@", 1)[0]
        token = re.split(r"[._-]", prefix)[0]
        if token:
            return token[0].upper() + token[1:].lower()

    return "User"


def get_greeting(now: datetime | None = None, timezone: str | None = None) -> Greeting:
    """Pick a time-of-day greeting in the user's timezone.

    An unknown timezone falls back to the clock of ``now`` as given.
    """
    now = now or datetime.now().astimezone()
    hour = now.hour
    if timezone:
        try:
            hour = now.astimezone(ZoneInfo(timezone)).hour
        except (ZoneInfoNotFoundError, ValueError):
            hour = now.hour

    if 5 <= hour < 12:
        text = "Good morning"
    elif 12 <= hour < 18:
        text = "Good afternoon"
    else:
        text = "Good evening"
    return Greeting(greeting=text, subtitle="Let's make today count.")
