"""Dice. Injected into the Game so tests can decide what gets rolled."""

import random
from typing import Optional, Protocol

from src.ludo.board import DIE_FACES


class Dice(Protocol):
    def roll(self) -> int: ...


class RandomDice:
    """Fair six-sided die."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.SystemRandom()

    def roll(self) -> int:
        return self._rng.choice(DIE_FACES)
