# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import math

from pyasn1.codec.der import decoder
from pyasn1_modules import rfc8017
import pytest

from dhutils import pem
from dhutils import rsa
from dhutils.errors import ConfigurationError

P, Q, E = 1013, 1019, 3
PLAINTEXT = 51010


@pytest.fixture(scope="module")
def toy_key() -> rsa.RSAPrivKey:
    # The brute-force inverse only exists because 3 is coprime to (1013-1)(1019-1).
    assert math.gcd(E, (P - 1) * (Q - 1)) == 1
    return rsa.RSAPrivKey.from_primes(P, Q, E)


def test_key_material(toy_key):
    assert toy_key.mod == 1032247
    assert toy_key.totient == 1030216
    assert toy_key.pub.mod == toy_key.mod
    assert toy_key.pub.expo == E
    assert toy_key.expo == 686811
    assert toy_key.gcd == 1
    assert toy_key.check == 1


def test_private_exponent_is_inverse(toy_key):
    assert toy_key.expo == pow(E, -1, toy_key.totient)


def test_round_trip(toy_key):
    ciphertext = toy_key.pub.encrypt(PLAINTEXT)
    assert ciphertext == 908920
    assert toy_key.decrypt(ciphertext) == PLAINTEXT


@pytest.mark.parametrize("message", [0, 1, 2, 1032246, 424242])
def test_round_trip_range(toy_key, message):
    assert toy_key.decrypt(toy_key.pub.encrypt(message)) == message


@pytest.mark.parametrize("message", [-1, 1032247, 2**40])
def test_message_range(toy_key, message):
    with pytest.raises(ValueError):
        toy_key.pub.encrypt(message)
    with pytest.raises(ValueError):
        toy_key.decrypt(message)


@pytest.mark.parametrize("p,q,e,match", [
    (1000, 1019, 3, "p = 1000 is not prime"),
    (1013, 1, 3, "q = 1 is not prime"),
    (1013, 1013, 3, "distinct"),
    (1013, 1019, 2, "gcd"),
    (11, 17, 5, "gcd"),
    (1013, 1019, 1, "No private exponent"),
])
def test_from_primes_validates(p, q, e, match):
    with pytest.raises(ConfigurationError, match=match):
        rsa.RSAPrivKey.from_primes(p, q, e)


def test_from_primes_toy_cap():
    with pytest.raises(ValueError):
        rsa.RSAPrivKey.from_primes(100003, 100019, 3)


@pytest.mark.parametrize("p,q,e", [(61, 53, 17), (11, 13, 7), (1009, 1013, 5)])
def test_from_primes_small(p, q, e):
    key = rsa.RSAPrivKey.from_primes(p, q, e)
    assert key.expo == pow(e, -1, (p - 1) * (q - 1))
    assert key.decrypt(key.pub.encrypt(42)) == 42


def test_public_pem_round_trip(toy_key):
    text = toy_key.pub.export_pem()
    assert text.startswith(pem.PEM_TYPES["PKCS1_PUB"][0])
    imported = rsa.RSAPubKey.import_pem(text)
    assert imported.mod == toy_key.mod
    assert imported.expo == E


def test_private_pem_round_trip(toy_key):
    imported = rsa.RSAPrivKey.import_pem(toy_key.export_pem())
    assert imported.mod == toy_key.mod
    assert imported.expo == toy_key.expo
    assert imported.pub.expo == E
    assert (imported.p, imported.q) == (P, Q)
    assert imported.decrypt(toy_key.pub.encrypt(PLAINTEXT)) == PLAINTEXT


def test_private_pem_crt_components(toy_key):
    der = pem.from_pem(toy_key.export_pem(), "PKCS1_PRIV")
    keydata, _ = decoder.decode(der, asn1Spec=rfc8017.RSAPrivateKey())
    assert int(keydata["exponent1"]) == toy_key.expo % (P - 1)
    assert int(keydata["exponent2"]) == toy_key.expo % (Q - 1)
    assert int(keydata["coefficient"]) == pow(Q, -1, P)


def test_private_pem_needs_primes():
    with pytest.raises(NotImplementedError):
        rsa.RSAPrivKey(1032247, 3, 686811).export_pem()
