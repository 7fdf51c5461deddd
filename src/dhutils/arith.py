"""Modular arithmetic primitives shared by the DH and RSA computations.

Provides binary modular exponentiation, the Extended Euclidean Algorithm and the brute-force modular inverse used
by the toy RSA computation.

Typical usage example:

    powmod(5, 117, 19)
    g, s, t = eea(3, 1030216)
    d = mod_inverse_search(3, 1030216)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


def powmod(base: int, exp: int, mod: int) -> int:
    """Computes `base**exp % mod` by square-and-multiply.

    Every intermediate product is reduced modulo `mod`, so operands never grow beyond `mod**2`.

    Args:
        base: The base. Negative values are reduced modulo `mod` first.
        exp: The exponent. Must be >= 0.
        mod: The modulus. Must be >= 1.

    Returns:
        The residue in range [0, mod-1].

    Raises:
        ValueError: If `exp` is negative or `mod` is not positive.
    """
    if exp < 0:
        raise ValueError("Exponent must be >= 0")
    if mod < 1:
        raise ValueError("Modulus must be >= 1")
    if mod == 1:
        return 0
    result = 1
    base %= mod
    while exp > 0:
        if exp & 1:
            result = (result * base) % mod
        base = (base * base) % mod
        exp >>= 1
    return result


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*s0 + b*t0 = r0 = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of two integers.
        As well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def mod_inverse_search(e: int, m: int) -> int:
    """Finds the modular inverse of `e` by linear search.

    Tries every candidate in [2, m-1] in order, which is O(m) and only sensible for toy-sized moduli.

    Args:
        e: The value to invert.
        m: The modulus.

    Returns:
        The smallest `d` in [2, m-1] with `e*d % m == 1`, or -1 if there is none.
    """
    for d in range(2, m):
        if (e * d) % m == 1:
            return d
    return -1
