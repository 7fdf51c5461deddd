"""Primitive root (generator) testing and search over the multiplicative group modulo a prime.

A candidate `g` generates the group of order `p - 1` exactly when `g**((p-1)/f) % p != 1` for every distinct prime
factor `f` of `p - 1`. For a safe prime `p = 2*r + 1` those factors are just 2 and `r`.

Typical usage example:

    is_generator(2, 11, [2, 5])
    find_generator(p, factor_distinct(p - 1), start=16)
    find_generator(p, safe_prime_factors(r), start=100)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
from typing import Iterable

from dhutils.arith import powmod
from dhutils.errors import SearchExhaustedError

logger = logging.getLogger(__name__)


def safe_prime_factors(r: int) -> list[int]:
    """Distinct prime factors of `p - 1` for the safe prime `p = 2*r + 1`, with no search."""
    return sorted({2, r})


def is_generator(g: int, p: int, factors: Iterable[int]) -> bool:
    """Checks whether `g` is a primitive root modulo the prime `p`.

    Stops at the first factor whose reduced power collapses to 1.

    Args:
        g: The candidate generator.
        p: The prime modulus.
        factors: The distinct prime factors of `p - 1`.

    Returns:
        True if `g` generates the whole multiplicative group modulo `p`, False otherwise.
    """
    if g % p == 0:
        return False
    order = p - 1
    for f in factors:
        if powmod(g, order // f, p) == 1:
            return False
    return True


def is_generator_safe_prime(g: int, p: int, r: int) -> bool:
    """`is_generator()` for the safe prime `p = 2*r + 1`."""
    return is_generator(g, p, safe_prime_factors(r))


def find_generator(p: int, factors: Iterable[int], start: int = 2, max_attempts: int | None = None) -> int:
    """Linearly scans for the first primitive root modulo `p` at or above `start`.

    Args:
        p: The prime modulus.
        factors: The distinct prime factors of `p - 1`.
        start: The first candidate. Candidates below 2 are skipped.
        max_attempts: Maximum number of candidates to test.
            Defaults to every remaining candidate below `p`.

    Returns:
        The smallest generator `g >= start`.

    Raises:
        SearchExhaustedError: If no candidate within the bound is a generator.
    """
    factors = list(factors)
    start = max(start, 2)
    stop = p
    if max_attempts is not None:
        stop = min(stop, start + max_attempts)
    for g in range(start, stop):
        if is_generator(g, p, factors):
            logger.info("Generator %d found after %d candidates", g, g - start + 1)
            return g
    raise SearchExhaustedError(f"No generator modulo {p} found in [{start}, {stop - 1}].")
