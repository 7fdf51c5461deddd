"""Toy "textbook" RSA over small primes.

The private exponent is found by brute-force search rather than inversion, which is why the totient is capped.
Keys can be exported to PKCS#1 PEM for inspection with standard tooling.

Typical usage example:

    pk = RSAPrivKey.from_primes(1013, 1019, 3)
    c = pk.pub.encrypt(51010)
    m = pk.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.codec.native import encoder as localize
from pyasn1_modules import rfc8017

from dhutils import pem
from dhutils import primes
from dhutils.arith import eea
from dhutils.arith import mod_inverse_search
from dhutils.arith import powmod
from dhutils.errors import ConfigurationError

logger = logging.getLogger(__name__)

TOY_TOTIENT_CAP = 2**32


class RSAKey:
    """The overall RSA key class implementation.

    Attributes:
        mod: The modulus of the keypair.
        expo: The exponent of the key, whether private or public.
    """

    def __init__(self, mod: int, expo: int) -> None:
        self.mod = mod
        self.expo = expo

    def c_rsa(self, message: int) -> int:
        """Performs core RSA operation. (Encrypt/Decrypt).

        Args:
            message: The int-marshalled message.

        Returns:
            `message**expo % mod`

        Raises:
            ValueError: If the message is out of range for the current key.
        """
        if not 0 <= message < self.mod:
            raise ValueError("Message representative must be in range [0, mod-1]")
        return powmod(message, self.expo, self.mod)


class RSAPubKey(RSAKey):
    """A Public Key consists solely of a modulus and exponent."""

    def encrypt(self, message: int) -> int:
        return self.c_rsa(message)

    def export_pem(self) -> str:
        """Export the Public RSA key as PKCS#1 PEM text."""
        keydata = rfc8017.RSAPublicKey()
        keydata["modulus"] = self.mod
        keydata["publicExponent"] = self.expo
        return pem.to_pem("PKCS1_PUB", encoder.encode(keydata))

    @classmethod
    def import_pem(cls, text: str) -> "RSAPubKey":
        payload = pem.from_pem(text, "PKCS1_PUB")
        keydata, _ = decoder.decode(payload, asn1Spec=rfc8017.RSAPublicKey())
        pykeyd = localize.encode(keydata)
        return cls(pykeyd["modulus"], pykeyd["publicExponent"])


class RSAPrivKey(RSAKey):
    """RSA Private Key class implementation.

    Attributes:
        mod: The modulus of the keypair.
        expo: The private exponent of the key.
        pub: The public key of the key.
        p: Private Prime 1.
        q: Private Prime 2.
    """

    def __init__(self, mod: int, pub_exp: int, priv_exp: int, p: int | None = None, q: int | None = None) -> None:
        super().__init__(mod, priv_exp)
        self.pub: RSAPubKey = RSAPubKey(mod, pub_exp)
        self.p: int | None = p
        self.q: int | None = q

    @property
    def totient(self) -> int | None:
        """Euler's totient of the modulus, if the primes are known."""
        if not self.p or not self.q:
            return None
        return (self.p - 1) * (self.q - 1)

    @property
    def gcd(self) -> int:
        """gcd(e, phi(n)), computed with the Extended Euclidean Algorithm."""
        return eea(self.pub.expo, self.totient)[0]

    @property
    def check(self) -> int:
        """`e*d mod phi(n)`, which is 1 for a consistent key."""
        return self.pub.expo * self.expo % self.totient

    def decrypt(self, ciphertext: int) -> int:
        return self.c_rsa(ciphertext)

    def export_pem(self) -> str:
        """Exports the key as PKCS#1 PEM text, including the CRT components.

        Raises:
            NotImplementedError: If the primes are unknown.
        """
        if not self.p or not self.q:
            raise NotImplementedError("CRT-less key export is not supported.")
        interkey = rfc8017.RSAPrivateKey()
        interkey["version"] = 0
        interkey["modulus"] = self.mod
        interkey["publicExponent"] = self.pub.expo
        interkey["privateExponent"] = self.expo
        interkey["prime1"] = self.p
        interkey["prime2"] = self.q
        interkey["exponent1"] = self.expo % (self.p - 1)
        interkey["exponent2"] = self.expo % (self.q - 1)
        interkey["coefficient"] = eea(self.q, self.p)[1] % self.p
        return pem.to_pem("PKCS1_PRIV", encoder.encode(interkey))

    @classmethod
    def import_pem(cls, text: str) -> "RSAPrivKey":
        """Imports a PKCS#1 PEM private key.

        Raises:
            IOError: For multi-prime keys.
        """
        payload = pem.from_pem(text, "PKCS1_PRIV")
        keydata, _ = decoder.decode(payload, asn1Spec=rfc8017.RSAPrivateKey())
        if keydata["version"] != 0:
            raise IOError("Multi-prime keys are not supported.")
        pykeyd = localize.encode(keydata)
        return cls(pykeyd["modulus"], pykeyd["publicExponent"], pykeyd["privateExponent"], pykeyd["prime1"],
                   pykeyd["prime2"])

    @classmethod
    def from_primes(cls, p: int, q: int, e: int = 3) -> "RSAPrivKey":
        """Derives a toy key pair from two small primes.

        Args:
            p: The first prime.
            q: The second prime, distinct from `p`.
            e: The public exponent. Must be coprime to (p-1)(q-1).

        Returns:
            The private key, holding its public key under `pub`.

        Raises:
            ConfigurationError: If `p` or `q` is not prime, they are equal, or `e` has no inverse mod phi(n).
            ValueError: If phi(n) is too large for the brute-force search.
        """
        for name, val in (("p", p), ("q", q)):
            if not primes.check_prime(val):
                raise ConfigurationError(f"{name} = {val} is not prime.")
        if p == q:
            raise ConfigurationError("p and q must be distinct.")
        totient = (p - 1) * (q - 1)
        if totient >= TOY_TOTIENT_CAP:
            raise ValueError(f"phi(n) must be below {TOY_TOTIENT_CAP} for the toy computation.")
        g, _, _ = eea(e, totient)
        if g != 1:
            raise ConfigurationError(f"gcd(e, phi(n)) = {g}; e has no inverse modulo phi(n).")
        d = mod_inverse_search(e, totient)
        if d == -1:
            raise ConfigurationError("No private exponent found in [2, phi(n)-1].")
        logger.debug("Private exponent found: %d", d)
        return cls(p * q, e, d, p, q)
