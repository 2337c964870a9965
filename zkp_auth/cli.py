"""
cli.py
-------
Command line entry point.

Usage:
  zkp-auth server
  zkp-auth client <username> [register|login]

If the client action is omitted, both register and login are performed.
"""

import argparse
import logging
import sys

import requests

from zkp_auth import config
from zkp_auth.actors import Prover
from zkp_auth.client import AuthClient, load_secret, save_secret
from zkp_auth.exceptions import ZKPAuthError
from zkp_auth.parameters import get_group

logger = logging.getLogger("zkp_auth")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="zkp-auth", description="Chaum-Pedersen ZKP authentication")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    sub = parser.add_subparsers(dest="mode", required=True)

    server = sub.add_parser("server", help="run the authentication server")
    server.add_argument("--host", default=config.HOST)
    server.add_argument("--port", type=int, default=config.PORT)

    client = sub.add_parser("client", help="register and/or log in")
    client.add_argument("username")
    client.add_argument("action", nargs="?", choices=["register", "login", "both"], default="both")
    client.add_argument("--url", default=config.SERVER_URL)
    client.add_argument("--secret-dir", default=None)
    return parser


def run_client(args) -> int:
    params = get_group(config.GROUP_BITS)
    client = AuthClient(args.url)

    if client.fetch_parameters() != params:
        logger.error("Server uses different group parameters; refusing to continue")
        return 1

    if args.action == "login":
        try:
            secret = load_secret(args.username, args.secret_dir)
        except FileNotFoundError:
            logger.error("No secret found for user %r. Please register first.", args.username)
            return 1
        prover = Prover(params, secret)
    else:
        prover = Prover.with_random_secret(params)
        path = save_secret(args.username, prover.secret, args.secret_dir)
        logger.info("Generated and saved secret for user %r to %s", args.username, path)

    if args.action in ("register", "both"):
        client.register(args.username, prover.public_values)
        logger.info("Registration successful for user %r", args.username)

    if args.action in ("login", "both"):
        session_id = client.login(args.username, prover)
        logger.info("Authentication successful for user %r", args.username)
        print(session_id)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=config.LOG_FORMAT)

    if args.mode == "server":
        # Imported here so the client does not need Flask loaded
        from zkp_auth.server import run
        run(args.host, args.port)
        return 0

    try:
        return run_client(args)
    except ZKPAuthError as e:
        logger.error("%s: %s", e.kind, e)
        return 1
    except requests.RequestException as e:
        logger.error("Could not reach server: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
