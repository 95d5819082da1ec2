"""Command-line interface for the mock user service."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from usermock.client import MockServiceError, MockUserClient
from usermock.config import ServiceSettings, apply_env_overrides, load_settings, settings_from_env

logger = logging.getLogger("usermock.main")

_DEFAULT_SERVICE_URL = "http://127.0.0.1:8080"
_KNOWN_COMMANDS = {"serve", "stats", "generate", "reset", "clear"}


def _add_service_url(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--service-url",
        default=None,
        help=(
            "Base URL of a running mock user service. Defaults to USERMOCK_SERVICE_URL "
            f"or {_DEFAULT_SERVICE_URL}."
        ),
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mock user service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP mock user service")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: from settings)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    serve_parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file (default: USERMOCK_CONFIG or config/usermock.yaml)",
    )

    stats_parser = subparsers.add_parser("stats", help="Print user counts from a running service")
    _add_service_url(stats_parser)

    generate_parser = subparsers.add_parser("generate", help="Generate random users remotely")
    generate_parser.add_argument("count", type=int, help="Number of users to generate")
    _add_service_url(generate_parser)

    reset_parser = subparsers.add_parser("reset", help="Restore the default seed data")
    _add_service_url(reset_parser)

    clear_parser = subparsers.add_parser("clear", help="Remove every stored user")
    _add_service_url(clear_parser)

    args_list = list(argv) if argv is not None else sys.argv[1:]

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in _KNOWN_COMMANDS:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _resolve_settings(args: argparse.Namespace) -> ServiceSettings:
    try:
        if args.config:
            settings = apply_env_overrides(load_settings(Path(args.config).expanduser()))
        else:
            settings = settings_from_env()
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    return replace(settings, **overrides) if overrides else settings


def _serve(settings: ServiceSettings) -> None:
    from usermock.service import create_app
    import uvicorn

    logger.info("Starting mock user service on http://%s:%s", settings.host, settings.port)

    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")


def _build_client(args: argparse.Namespace) -> MockUserClient:
    base_url = args.service_url or os.getenv("USERMOCK_SERVICE_URL") or _DEFAULT_SERVICE_URL
    return MockUserClient(base_url, api_token=os.getenv("USERMOCK_API_TOKEN"))


def _print_stats(client: MockUserClient) -> None:
    stats = client.get_stats()
    print(f"{'Total':<10} {stats['total']:>6}")
    print(f"{'Active':<10} {stats['active']:>6}")
    print(f"{'Inactive':<10} {stats['inactive']:>6}")
    print(f"{'Suspended':<10} {stats['suspended']:>6}")


def _print_generated(client: MockUserClient, count: int) -> None:
    users = client.generate(count)
    print(f"Generated {len(users)} user(s):")
    print(f"{'ID':>4}  {'Username':<16}  {'Email':<32}  Status")
    print("-" * 72)
    for user in users:
        print(f"{user['id']:>4}  {user['username']:<16}  {user['email']:<32}  {user['status']}")


def _run_remote(args: argparse.Namespace) -> int:
    client = _build_client(args)
    try:
        if args.command == "stats":
            _print_stats(client)
        elif args.command == "generate":
            _print_generated(client, args.count)
        elif args.command == "reset":
            print(client.reset())
        elif args.command == "clear":
            print(client.clear())
    except MockServiceError as exc:
        print(f"Error: {exc}")
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)

    if args.command == "serve":
        _serve(_resolve_settings(args))
        return 0
    return _run_remote(args)


if __name__ == "__main__":
    raise SystemExit(main())
