"""Diffie-Hellman and toy RSA Utilities in an Academic Sense.

Provides the modular arithmetic, primality, safe-prime and primitive-root engine behind a Diffie-Hellman key
exchange over a prime field, plus a small textbook RSA computation. Not hardened for production key management.

Typical usage example:

    sp = SafePrime.generate(51)
    group = DHGroup.from_safe_prime(sp, start=100)
    ex = exchange(group, 51015, 51016)
    pk = RSAPrivKey.from_primes(1013, 1019, 3)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from dhutils.arith import powmod
from dhutils.dh import DHGroup
from dhutils.dh import exchange
from dhutils.dh import Exchange
from dhutils.dh import KeyPair
from dhutils.dh import SafePrime
from dhutils.errors import ConfigurationError
from dhutils.errors import SearchExhaustedError
from dhutils.primes import check_prime
from dhutils.primes import factor_distinct
from dhutils.primes import gen_safe_prime
from dhutils.roots import find_generator
from dhutils.roots import is_generator
from dhutils.roots import is_generator_safe_prime
from dhutils.rsa import RSAPrivKey
from dhutils.rsa import RSAPubKey

__version__ = "0.0.1"
__all__ = [
    "ConfigurationError",
    "DHGroup",
    "Exchange",
    "KeyPair",
    "RSAPrivKey",
    "RSAPubKey",
    "SafePrime",
    "SearchExhaustedError",
    "check_prime",
    "exchange",
    "factor_distinct",
    "find_generator",
    "gen_safe_prime",
    "is_generator",
    "is_generator_safe_prime",
    "powmod",
]
