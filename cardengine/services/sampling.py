import random
from typing import TypeVar

T = TypeVar("T")


def take_random(items: list[T], rng: random.Random) -> T:
    """
    Remove and return a uniformly chosen element.

    Swaps the pick with the last element and pops, so removal is O(1).
    The list order is not preserved.

    Raises:
        IndexError: If items is empty
    """
    if not items:
        raise IndexError("take_random from empty list")
    idx = rng.randrange(len(items))
    items[idx], items[-1] = items[-1], items[idx]
    return items.pop()
