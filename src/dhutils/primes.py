"""Core prime utilities: primality testing, safe-prime generation and trial-division factorization.

Primality is probabilistic, using a small-prime trial division pre-check followed by a FIPS 186-5 style Miller-Rabin
test. Safe primes are produced by rejection sampling with an injectable random source, so a seeded
`random.Random` gives reproducible parameters.

Typical usage example:

    get_pre_primes(12000)
    check_prime(982451653173961852241340015187, 30)
    p, r = gen_safe_prime(51, rng=random.Random(2025))
    factor_distinct(p - 1)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import random
import secrets

from dhutils.errors import SearchExhaustedError

logger = logging.getLogger(__name__)

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
SAFE_PRIME_MIN_BITS: int = 130
DEFAULT_REPS: int = 30


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    result = [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]
    return result


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    Uses the `_SMALL_PRIMES` module global as a cache. Regeneration occurs if the requested range is greater, forced
    by `change` or the cache is empty.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.
            Ignored if smaller or equal than `_SMALL_PRIMES_CAP`, `change` is False and `_SMALL_PRIMES` is non-empty.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order. All primes at least to `n` or more unless `change` is True.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check the provided `no` against the known small primes.

    Runs a fast pre-check before Miller-Rabin by using modulo division on our known frequent primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Defaults to 10000.
           Passed to `get_pre_primes()`, without the `change` argument.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int) -> bool:
    """Perform Miller-Rabin primality test.

    Performs the Miller-Rabin primality test as specified in FIPS 186-5.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = secrets.randbelow(w - 3) + 2
        z = pow(b, m, w)
        if z == 1 or z == w - 1:
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def check_prime(candidate: int, iters: None | int = None, n: int = 10000) -> bool:
    """Performs a composite Primality test, using a limited amount of trial divisions, before a Miller-Rabin test.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform (the confidence level).
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        n: The number up to which to generate primes. Defaults to 10000.
            Passed to `_trial_division()`.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if iters is None:
        if candidate.bit_length() <= 512:
            iters = 40
        elif candidate.bit_length() <= 1024:
            iters = 56
        elif candidate.bit_length() <= 1536:
            iters = 64
        elif candidate.bit_length() <= 2048:
            iters = 70
        else:
            iters = 74

    return _miller_rabin(candidate, iters)


def next_prime(n: int, iters: None | int = None) -> int:
    """Returns the smallest probable prime strictly greater than `n`.

    Args:
        n: The starting point.
        iters: Miller-Rabin iterations, passed to `check_prime()`.
    """
    if n < 2:
        return 2
    candidate = n + 1 if n % 2 == 0 else n + 2
    while not check_prime(candidate, iters):
        candidate += 2
    return candidate


def digits_to_bits(digits: int) -> int:
    """Approximate bit length of a number with `digits` decimal digits, never below 3."""
    return max(3, int(digits * math.log2(10) + 0.5))


def gen_safe_prime(digits: int,
                   reps: int = DEFAULT_REPS,
                   rng: random.Random | None = None,
                   max_attempts: int | None = None,
                   min_bits: int = SAFE_PRIME_MIN_BITS) -> tuple[int, int]:
    """Generates a safe prime `p = 2*r + 1` with at least `digits` decimal digits.

    Rejection sampling: each attempt draws a random `r` of `bits - 1` bits with its top bit forced, moves it to the
    next probable prime and keeps the pair if `2*r + 1` is a probable prime of the requested length as well.

    Args:
        digits: Minimum number of decimal digits of `p`. Must be >= 1.
        reps: Miller-Rabin iterations applied to both `r` and `p`. Must be >= 1.
            Higher values lower the false-positive probability at a higher cost.
        rng: Random source with a `getrandbits` method. Defaults to `secrets.SystemRandom()`.
            Pass a seeded `random.Random` for reproducible output.
        max_attempts: Upper bound on sampling attempts. Defaults to 50 attempts per bit of `p`.
        min_bits: Lower bound on the bit length of `p`. Defaults to `SAFE_PRIME_MIN_BITS`.

    Returns:
        The tuple `(p, r)`.

    Raises:
        ValueError: If `digits` or `reps` is below 1.
        SearchExhaustedError: If no safe prime turned up within `max_attempts`.
    """
    if digits < 1:
        raise ValueError("digits must be >= 1")
    if reps < 1:
        raise ValueError("reps must be >= 1")
    if rng is None:
        rng = secrets.SystemRandom()
    bits = max(digits_to_bits(digits), min_bits, 3)
    if max_attempts is None:
        max_attempts = bits * 50
    floor = 10**(digits - 1)
    logger.debug("Searching for a %d-bit safe prime with at least %d digits", bits, digits)
    for attempt in range(1, max_attempts + 1):
        r = rng.getrandbits(bits - 1) | (1 << (bits - 2))
        r = next_prime(r - 1, reps)
        p = 2 * r + 1
        if not check_prime(p, reps):
            continue
        if p < floor:
            logger.debug("Attempt %d: safe prime too short, retrying", attempt)
            continue
        logger.info("Safe prime found after %d attempts", attempt)
        return p, r
    raise SearchExhaustedError(f"No safe prime with {digits} digits found in {max_attempts} attempts.")


def factor_distinct(n: int) -> list[int]:
    """Finds the distinct prime factors of `n` by trial division.

    Divides out 2, then odd divisors from 3 upwards until the divisor squared exceeds the remaining cofactor. A
    remaining cofactor above 1 is itself prime. Cost is O(sqrt(n)) divisions in the worst case.

    Args:
        n: The number to factor. Values below 2 have no prime factors.

    Returns:
        The distinct prime factors in ascending order, without multiplicity.
    """
    factors: list[int] = []
    if n < 2:
        return factors
    if n % 2 == 0:
        factors.append(2)
        while n % 2 == 0:
            n //= 2
    i = 3
    while n > 1:
        if n % i == 0:
            factors.append(i)
            while n % i == 0:
                n //= i
        if i * i > n:
            break
        i += 2
    if n > 1:
        factors.append(n)
    return factors
