"""
Random sampling for the renderer.

Every stochastic decision (pixel jitter, lens samples, shutter times,
scatter directions, medium free paths) draws from a numpy ``Generator``.
The active generator is held in a context variable so each thread or
task can own its own stream, and a render can install a seeded one to
make its output reproducible.
"""

from __future__ import annotations
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

import numpy as np


_default_rng: np.random.Generator = np.random.default_rng()
_active_rng: ContextVar[Optional[np.random.Generator]] = ContextVar('pathforge_rng', default=None)


def get_rng() -> np.random.Generator:
    """Return the generator for the current context."""
    rng = _active_rng.get()
    if rng is None:
        return _default_rng
    return rng


def seed(value: Optional[int] = None) -> None:
    """Reseed the process-wide default generator."""
    global _default_rng
    _default_rng = np.random.default_rng(value)


@contextmanager
def use_rng(rng: np.random.Generator) -> Iterator[np.random.Generator]:
    """Install ``rng`` as the active generator for the duration of the block.

    Example:
        with use_rng(np.random.default_rng(7)):
            image = renderer.render(world, camera)
    """
    token = _active_rng.set(rng)
    try:
        yield rng
    finally:
        _active_rng.reset(token)


def random_double(min_val: float = 0.0, max_val: float = 1.0) -> float:
    """Uniform real in [min_val, max_val)."""
    return min_val + (max_val - min_val) * float(get_rng().random())


def random_int(min_val: int, max_val: int) -> int:
    """Uniform integer in [min_val, max_val] (inclusive)."""
    return int(get_rng().integers(min_val, max_val + 1))
