"""Loot and item-loss math. Pure calculations, no I/O.

When a character is defeated one random inventory stack shrinks:
- a stack of one is lost entirely
- a larger stack loses 80% (rounded down) but always keeps at least one
"""
from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")

STACK_LOSS_RATIO = 0.8


def calculate_stack_loss(stack: int) -> dict:
    """Units lost from a stack on defeat. Returns {"lost": int, "remaining": int}."""
    if stack <= 1:
        return {"lost": stack, "remaining": 0}
    lost = min(stack - 1, int(stack * STACK_LOSS_RATIO))
    return {"lost": lost, "remaining": stack - lost}


def pick_random(candidates: Sequence[T], rng: random.Random | None = None) -> T | None:
    """Uniformly pick one element, or None from an empty sequence."""
    if not candidates:
        return None
    rng = rng or random
    return rng.choice(candidates)
