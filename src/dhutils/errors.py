"""Exception types raised by the DH and RSA engines."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class ConfigurationError(ValueError):
    """Raised when caller-supplied parameters (a modulus, RSA primes or exponent) are unusable."""


class SearchExhaustedError(RuntimeError):
    """Raised when a bounded search loop runs out of attempts without a result."""
