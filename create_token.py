"""Issue an access token for an existing account.

Opens a regular session (revocable through logout) and prints the
token.  Useful for scripting against the API.

Usage:
    python create_token.py --email admin@example.com --days 365
"""
import argparse
import sys

from sports_events_api.app.core.config import settings
from sports_events_api.app.core.db import get_connection, init_db
from sports_events_api.app.services.auth_service import AuthService


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue an access token for an existing account.")
    ap.add_argument("--email", required=True, help="E-mail of the account")
    ap.add_argument("--days", type=int, default=1, help="Token lifetime in days")
    args = ap.parse_args()

    init_db()
    conn = get_connection()
    try:
        row = conn.execute("SELECT id FROM users WHERE email = ?", (args.email.lower(),)).fetchone()
    finally:
        conn.close()
    if not row:
        print(f"[!] No user found with email: {args.email}", file=sys.stderr)
        sys.exit(2)

    settings.access_token_expire_minutes = args.days * 24 * 60
    token = AuthService.open_session(row["id"])
    print(token.access_token)


if __name__ == "__main__":
    main()
