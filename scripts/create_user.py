import argparse
import getpass
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from usermock.client import MockServiceError, MockUserClient
from usermock.models import UserStatus


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a user on a running mock user service")
    parser.add_argument("username", help="Username for the new account")
    parser.add_argument("email", help="Email address for the new account")
    parser.add_argument("--full-name", default=None, help="Optional display name")
    parser.add_argument("--phone", default=None, help="Optional phone number")
    parser.add_argument(
        "--status",
        choices=[member.value for member in UserStatus],
        default=UserStatus.ACTIVE.value,
        help="Initial account status (default: ACTIVE)",
    )
    parser.add_argument(
        "--service-url",
        default=None,
        help="Base URL of the service (defaults to USERMOCK_SERVICE_URL or http://127.0.0.1:8080)",
    )
    return parser.parse_args(argv)


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        if not password:
            print("Password must not be empty.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


def create_user(client: MockUserClient, args: argparse.Namespace, password: str) -> int:
    # The service stores duplicates without complaint, so check first.
    if client.username_exists(args.username):
        print(f"Error: username {args.username!r} is already taken", file=sys.stderr)
        return 1
    if client.email_exists(args.email):
        print(f"Error: email {args.email!r} is already registered", file=sys.stderr)
        return 1

    user = client.create_user(
        {
            "username": args.username,
            "email": args.email,
            "password": password,
            "full_name": args.full_name,
            "phone": args.phone,
            "status": args.status,
        }
    )
    print(f"Created user #{user['id']}: {user['username']} <{user['email']}> [{user['status']}]")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    password = prompt_for_password()

    base_url = args.service_url or os.getenv("USERMOCK_SERVICE_URL") or "http://127.0.0.1:8080"
    client = MockUserClient(base_url, api_token=os.getenv("USERMOCK_API_TOKEN"))

    try:
        return create_user(client, args, password)
    except MockServiceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
