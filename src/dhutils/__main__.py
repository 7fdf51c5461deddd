"""The Command Line Interface for the utility.

Runs one of the demonstrations and prints its results as labeled lines. Every tunable has the classroom default, so
running without arguments performs the safe-prime Diffie-Hellman demonstration.

Typical usage example:

    dhutils
    dhutils dh --modulus 982451653173961852241340015187 --start 16
    python -m dhutils rsa -p 1013 -q 1019 -e 3
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import pathlib
import random
import sys
import typing

import dhutils
from dhutils import dh
from dhutils import pem
from dhutils import rsa
from dhutils.errors import SearchExhaustedError

DEFAULT_SUBCOMMAND = "dh-fast"


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    default: typing.Any = None


help_dict: dict[str, HelpData] = {
    "dh":
        HelpData("Diffie-Hellman over a chosen prime, factoring P-1 by trial division."),
    "dh-fast":
        HelpData("Diffie-Hellman over a safe prime P = 2r+1."),
    "rsa":
        HelpData("Toy RSA encryption round trip."),
    "dh_modulus":
        HelpData(
            description="Prime modulus P. P-1 must be small-factor friendly.",
            format=int,
            default=982451653173961852241340015187,
        ),
    "dh_start":
        HelpData(description="First primitive root candidate.", format=int, default=16),
    "fast_modulus":
        HelpData(description="Hardcoded safe prime P, instead of generating one.", format=int),
    "fast_params":
        HelpData(description="PEM file with DH parameters whose prime is used as P.", format=pathlib.Path),
    "fast_start":
        HelpData(description="First primitive root candidate.", format=int, default=100),
    "digits":
        HelpData(description="Minimum decimal digits of the generated P.", format=int, default=51),
    "reps":
        HelpData(description="Miller-Rabin repetitions for P and r.", format=int, default=30),
    "seed":
        HelpData(description="Seed for the safe prime generator. Random if omitted.", format=int),
    "max_attempts":
        HelpData(description="Maximum safe prime sampling attempts.", format=int),
    "xa":
        HelpData(description="Private exponent of side A.", format=int, default=51015),
    "xb":
        HelpData(description="Private exponent of side B.", format=int, default=51016),
    "threshold":
        HelpData(description="Value both private exponents should exceed. Only warns.", format=int),
    "pem":
        HelpData(description="Also print the PEM encoding of the parameters or keys.", format=bool, default=False),
    "p":
        HelpData(description="First RSA prime.", format=int, default=1013),
    "q":
        HelpData(description="Second RSA prime.", format=int, default=1019),
    "e":
        HelpData(description="RSA public exponent.", format=int, default=3),
    "message":
        HelpData(description="Plaintext integer M, below n.", format=int, default=51010),
}


def _opt(parser, key: str, *flags: str) -> None:
    data = help_dict[key]
    parser.add_argument(*flags, dest=key, type=data.format, default=data.default, help=data.description)


exch = argparse.ArgumentParser(add_help=False)
_opt(exch, "xa", "--xa")
_opt(exch, "xb", "--xb")
_opt(exch, "threshold", "--threshold", "-t")
pemp = argparse.ArgumentParser(add_help=False)
pemp.add_argument("--pem", action="store_true", help=help_dict["pem"].description)
corep = argparse.ArgumentParser(prog="dhutils")
corep.add_argument("--version", action="version", version=f"%(prog)s {dhutils.__version__}")
corep.add_argument("--verbose", "-v", action="count", default=0, help="Log progress to stderr, twice for debug")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

dh_cmd = commands.add_parser("dh", parents=[exch, pemp], help=help_dict["dh"].description)
_opt(dh_cmd, "dh_modulus", "--modulus", "-m")
_opt(dh_cmd, "dh_start", "--start", "-s")

fast_cmd = commands.add_parser("dh-fast", parents=[exch, pemp], help=help_dict["dh-fast"].description)
source = fast_cmd.add_mutually_exclusive_group()
_opt(source, "fast_modulus", "--modulus", "-m")
_opt(source, "fast_params", "--params")
_opt(fast_cmd, "fast_start", "--start", "-s")
_opt(fast_cmd, "digits", "--digits", "-d")
_opt(fast_cmd, "reps", "--reps", "-r")
_opt(fast_cmd, "seed", "--seed")
_opt(fast_cmd, "max_attempts", "--max-attempts")

rsa_cmd = commands.add_parser("rsa", parents=[pemp], help=help_dict["rsa"].description)
_opt(rsa_cmd, "p", "-p")
_opt(rsa_cmd, "q", "-q")
_opt(rsa_cmd, "e", "-e")
_opt(rsa_cmd, "message", "--message", "-M")


def line(label: str, value: typing.Any, pad: int = 0) -> None:
    print(f"{label.ljust(pad)} = {value}")


def print_exchange(ex: dh.Exchange, pad: int) -> None:
    line("XA", ex.a.private, pad)
    line("XB", ex.b.private, pad)
    line("YA", ex.a.public, pad)
    line("YB", ex.b.public, pad)
    line("S_A", ex.s_a, pad)
    line("S_B", ex.s_b, pad)
    print(f"Keys match? {'YES' if ex.match else 'NO'}")


def run_dh(args: argparse.Namespace) -> bool:
    group = dh.DHGroup.from_prime(args.dh_modulus, args.dh_start)
    ex = dh.exchange(group, args.xa, args.xb, args.threshold)
    line("P (prime)", group.p, 10)
    line("alpha (g)", group.alpha, 10)
    print(f"Primitive root search time: {group.search_seconds:.6f} s")
    print_exchange(ex, 10)
    if args.pem:
        print(pem.encode_dh_parameters(group.p, group.alpha), end="")
    return ex.match


def run_dh_fast(args: argparse.Namespace) -> bool:
    if args.fast_params is not None:
        modulus, _ = pem.decode_dh_parameters(args.fast_params.read_text(encoding="ascii"))
        sp = dh.SafePrime.from_modulus(modulus, args.reps)
    elif args.fast_modulus is not None:
        sp = dh.SafePrime.from_modulus(args.fast_modulus, args.reps)
    else:
        rng = random.Random(args.seed) if args.seed is not None else None
        sp = dh.SafePrime.generate(args.digits, args.reps, rng, args.max_attempts)
    group = dh.DHGroup.from_safe_prime(sp, args.fast_start)
    ex = dh.exchange(group, args.xa, args.xb, args.threshold)
    print(f"P (prime, {sp.digits} digits) = {sp.p}")
    print(f"r ( (P-1)/2, prime ) = {sp.r}")
    line("alpha (generator)", group.alpha, 21)
    print(f"Primitive root search time: {group.search_seconds:.6f} s")
    print_exchange(ex, 0)
    if args.pem:
        print(pem.encode_dh_parameters(group.p, group.alpha), end="")
    return ex.match


def run_rsa(args: argparse.Namespace) -> bool:
    pk = rsa.RSAPrivKey.from_primes(args.p, args.q, args.e)
    ciphertext = pk.pub.encrypt(args.message)
    recovered = pk.decrypt(ciphertext)
    line("n", pk.mod, 13)
    line("totient", pk.totient, 13)
    line("e", pk.pub.expo, 13)
    line("d", pk.expo, 13)
    line("g", pk.gcd, 13)
    line("e*d mod phi(n)", pk.check, 13)
    line("M", args.message, 13)
    line("C = M^e mod n", ciphertext, 13)
    line("M'", recovered, 13)
    label = "M == M'"
    print(f"{label.ljust(13)} ? {'YES' if recovered == args.message else 'NO'}")
    if args.pem:
        print(pk.pub.export_pem(), end="")
        print(pk.export_pem(), end="")
    return recovered == args.message


runners: dict[str, typing.Callable[[argparse.Namespace], bool]] = {
    "dh": run_dh,
    "dh-fast": run_dh_fast,
    "rsa": run_rsa,
}


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, run the selected demonstration and exit non-zero on failure."""
    argv = sys.argv[1:] if argv is None else argv
    args = corep.parse_args(argv)
    if not args.subcommand:
        args = corep.parse_args([*argv, DEFAULT_SUBCOMMAND])
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    try:
        ok = runners[args.subcommand](args)
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)
    except SearchExhaustedError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
