"""Diffie-Hellman parameter setup and key-exchange computation over a prime field.

Two ways to obtain a group: the general path factors `p - 1` by trial division, while the fast path works on a safe
prime `p = 2*r + 1` whose `p - 1` factors are known to be 2 and `r`. Either way the generator search is timed in
CPU seconds, as that search is the expensive part of the setup.

Typical usage example:

    sp = SafePrime.generate(51)
    group = DHGroup.from_safe_prime(sp, start=100)
    ex = exchange(group, 51015, 51016)
    assert ex.match
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import random
import time
from typing import NamedTuple
import warnings

from dhutils import primes
from dhutils import roots
from dhutils.arith import powmod
from dhutils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class SafePrime(NamedTuple):
    """A safe prime `p = 2*r + 1` together with its Sophie Germain cofactor `r`."""
    p: int
    r: int

    @property
    def factors(self) -> list[int]:
        """The distinct prime factors of `p - 1`."""
        return roots.safe_prime_factors(self.r)

    @property
    def digits(self) -> int:
        return len(str(self.p))

    @classmethod
    def generate(cls,
                 digits: int,
                 reps: int = primes.DEFAULT_REPS,
                 rng: random.Random | None = None,
                 max_attempts: int | None = None,
                 min_bits: int = primes.SAFE_PRIME_MIN_BITS) -> "SafePrime":
        """Generates a fresh safe prime of at least `digits` decimal digits.

        See `primes.gen_safe_prime()` for the arguments.
        """
        return cls(*primes.gen_safe_prime(digits, reps, rng, max_attempts, min_bits))

    @classmethod
    def from_modulus(cls, p: int, reps: int = primes.DEFAULT_REPS) -> "SafePrime":
        """Validates a hardcoded safe prime.

        Args:
            p: The candidate modulus.
            reps: Miller-Rabin iterations for both `p` and `(p-1)/2`.

        Returns:
            The validated safe prime.

        Raises:
            ConfigurationError: If `p` is not prime, not of the form `2*r + 1`, or `(p-1)/2` is not prime.
            ValueError: If `reps` is below 1.
        """
        if reps < 1:
            raise ValueError("reps must be >= 1")
        if not primes.check_prime(p, reps):
            raise ConfigurationError("P is not prime.")
        if (p - 1) % 2 != 0:
            raise ConfigurationError("P is not of the form 2r+1.")
        r = (p - 1) // 2
        if not primes.check_prime(r, reps):
            raise ConfigurationError("(P-1)/2 is not prime; P is not safe.")
        return cls(p, r)


class KeyPair(NamedTuple):
    private: int
    public: int


class DHGroup:
    """A prime modulus together with a primitive root.

    Attributes:
        p: The prime modulus.
        alpha: The generator of the multiplicative group modulo `p`.
        factors: The distinct prime factors of `p - 1` used to verify `alpha`.
        search_seconds: CPU time spent searching for `alpha`.
    """

    def __init__(self, p: int, alpha: int, factors: list[int], search_seconds: float = 0.0) -> None:
        self.p = p
        self.alpha = alpha
        self.factors = factors
        self.search_seconds = search_seconds

    @classmethod
    def _search(cls, p: int, factors: list[int], start: int, max_attempts: int | None) -> "DHGroup":
        t0 = time.process_time()
        alpha = roots.find_generator(p, factors, start, max_attempts)
        seconds = time.process_time() - t0
        logger.info("Primitive root search took %.6f s", seconds)
        return cls(p, alpha, factors, seconds)

    @classmethod
    def from_prime(cls,
                   p: int,
                   start: int = 2,
                   reps: int = primes.DEFAULT_REPS,
                   max_attempts: int | None = None) -> "DHGroup":
        """Builds a group on an arbitrary prime, factoring `p - 1` by trial division.

        Only practical while the second largest prime factor of `p - 1` is small, as trial division runs until the
        divisor squared exceeds the remaining cofactor.

        Args:
            p: The prime modulus.
            start: The first generator candidate.
            reps: Miller-Rabin iterations used to validate `p`.
            max_attempts: Passed to `roots.find_generator()`.

        Raises:
            ConfigurationError: If `p` is not prime.
            ValueError: If `reps` is below 1.
        """
        if reps < 1:
            raise ValueError("reps must be >= 1")
        if not primes.check_prime(p, reps):
            raise ConfigurationError("P is not prime.")
        factors = primes.factor_distinct(p - 1)
        logger.debug("p-1 has %d distinct prime factors", len(factors))
        return cls._search(p, factors, start, max_attempts)

    @classmethod
    def from_safe_prime(cls, sp: SafePrime, start: int = 2, max_attempts: int | None = None) -> "DHGroup":
        """Builds a group on a safe prime, skipping factorization."""
        return cls._search(sp.p, sp.factors, start, max_attempts)

    def keypair(self, private: int) -> KeyPair:
        return KeyPair(private, powmod(self.alpha, private, self.p))

    def shared(self, peer_public: int, private: int) -> int:
        """The shared secret `peer_public**private % p`."""
        return powmod(peer_public, private, self.p)


class Exchange(NamedTuple):
    """Both sides of one DH computation."""
    a: KeyPair
    b: KeyPair
    s_a: int
    s_b: int

    @property
    def match(self) -> bool:
        return self.s_a == self.s_b


def exchange(group: DHGroup, xa: int, xb: int, threshold: int | None = None) -> Exchange:
    """Runs the DH computation for the private exponents `xa` and `xb`.

    Args:
        group: The group to compute in.
        xa: Private exponent of side A.
        xb: Private exponent of side B.
        threshold: Policy floor both private exponents are expected to exceed.
            Not enforced, a violation only warns.

    Returns:
        Both key pairs and both computed shared secrets.
    """
    if threshold is not None:
        for name, x in (("XA", xa), ("XB", xb)):
            if x <= threshold:
                warnings.warn(f"{name} does not exceed the threshold {threshold}.", RuntimeWarning)
    a = group.keypair(xa)
    b = group.keypair(xb)
    return Exchange(a, b, group.shared(b.public, xa), group.shared(a.public, xb))
