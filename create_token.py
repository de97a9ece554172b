"""Print a session token for a user id and email.

The token is signed with ``SECRET_KEY``, so it is only accepted by a
server running with the same secret.  Send it as the ``session``
cookie, e.g. ``curl --cookie "session=<token>" .../subscriptions``.

Usage:
    SECRET_KEY=... python create_token.py <user_id> <email> [--days 7]
"""
import argparse
import sys

from subscription_tracker_api.app.core.config import settings
from subscription_tracker_api.app.core.security import create_session_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue a session token.")
    ap.add_argument("user_id")
    ap.add_argument("email")
    ap.add_argument("--days", type=int, default=settings.session_max_age_days, help="Token lifetime in days")
    args = ap.parse_args()

    if not settings.secret_key:
        print("[!] SECRET_KEY is not set; the server would not accept this token.", file=sys.stderr)
        sys.exit(1)

    print(create_session_token(args.user_id, args.email.strip().lower(), expires_in=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
