"""
Command line entry point for sste.

Examples:

    sste random 32
    sste hash ./archive.tar
    sste verify ./archive.tar <hex digest>
    sste password-hash
    sste password-verify '$argon2id$v=19$m=65536,t=2,p=1$...'

Exit status is 0 on success or match, 1 on a digest/password mismatch and
2 when an operation fails.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys
from typing import List, Optional

from sste.config import ENV_COST_PROFILE, load_settings
from sste.crypto import Crypto, CryptoError
from sste.cli.logging_config import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


def _cmd_random(crypto: Crypto, args: argparse.Namespace) -> int:
    print(crypto.random_bytes(args.size).hex())
    return EXIT_OK


def _cmd_hash(crypto: Crypto, args: argparse.Namespace) -> int:
    print(crypto.integrity_hash_file(args.file).hex())
    return EXIT_OK


def _cmd_verify(crypto: Crypto, args: argparse.Namespace) -> int:
    try:
        digest = bytes.fromhex(args.digest)
    except ValueError:
        logger.info("digest argument is not valid hex")
        return EXIT_MISMATCH
    if crypto.integrity_verify_file(args.file, digest):
        print("OK")
        return EXIT_OK
    print("MISMATCH")
    return EXIT_MISMATCH


def _cmd_password_hash(crypto: Crypto, args: argparse.Namespace) -> int:
    password = getpass.getpass("Password: ")
    if getpass.getpass("Repeat password: ") != password:
        print("error: passwords do not match", file=sys.stderr)
        return EXIT_ERROR
    print(crypto.password_hash(password))
    return EXIT_OK


def _cmd_password_verify(crypto: Crypto, args: argparse.Namespace) -> int:
    password = getpass.getpass("Password: ")
    if crypto.password_verify(password, args.hash):
        print("OK")
        return EXIT_OK
    print("MISMATCH")
    return EXIT_MISMATCH


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sste",
        description="Hash, verify and generate secrets with the sste crypto facade.",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Argon2id cost profile (default: $SSTE_COST_PROFILE or interactive)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("random", help="Print N random bytes as hex")
    p.add_argument("size", type=int)
    p.set_defaults(func=_cmd_random)

    p = sub.add_parser("hash", help="Print the integrity digest of a file")
    p.add_argument("file")
    p.set_defaults(func=_cmd_hash)

    p = sub.add_parser("verify", help="Check a file against a hex integrity digest")
    p.add_argument("file")
    p.add_argument("digest")
    p.set_defaults(func=_cmd_verify)

    p = sub.add_parser("password-hash", help="Prompt for a password and print its hash")
    p.set_defaults(func=_cmd_password_hash)

    p = sub.add_parser("password-verify", help="Prompt for a password and check it against HASH")
    p.add_argument("hash")
    p.set_defaults(func=_cmd_password_verify)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    env = dict(os.environ)
    if args.profile:
        env[ENV_COST_PROFILE] = args.profile
    settings = load_settings(env)
    configure_logging(settings.log_level)
    logger.debug("using cost profile %s", settings.profile.name)

    crypto = Crypto(profile=settings.profile)
    try:
        return args.func(crypto, args)
    except (CryptoError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
