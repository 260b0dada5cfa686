import math
import time
from typing import TypeVar, Optional

T = TypeVar('T')

EPSILON_6 = 1e-6


def value_or_default(item: Optional[T], default: T) -> T:
    """Return item if it is not None, else return default."""
    if item is None:
        return default
    else:
        return item


def is_positive(value: float, epsilon: float = EPSILON_6) -> bool:
    """True when value exceeds epsilon and is finite."""
    return epsilon < value < math.inf


class Timer:
    t0: float = None

    def start(self):
        self.t0 = time.time()
        return self

    def time_elapsed(self):
        return time.time() - self.t0
