"""Uniform winner selection among participants who have not won yet."""
from __future__ import annotations

from typing import Sequence

from .exceptions import NoEligibleParticipants
from .models import Participant


def eligible_participants(participants: Sequence[Participant]) -> list[Participant]:
    return [p for p in participants if not p.won]


def select_winner(participants: Sequence[Participant], rng) -> Participant:
    """Pick one not-yet-won participant with probability ``1 / eligible_count``.

    ``rng`` is any ``random.Random``-compatible object; only ``randrange`` is used.
    """
    eligible = eligible_participants(participants)
    if not eligible:
        raise NoEligibleParticipants()
    return eligible[rng.randrange(len(eligible))]
