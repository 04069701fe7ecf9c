#!/usr/bin/env python3
"""
Reset an account's password directly in the SQLite database.

The new password is hashed the same way the API does
(PBKDF2-HMAC-SHA256, ``salthex$hashhex``).  Existing sessions of the
account are revoked so old tokens stop working.

Usage:
    python reset_password.py --db ./sports_events_api/sports_events.db --email fan@example.com

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from sports_events_api.app.core.config import settings
from sports_events_api.app.core.db import get_connection, utcnow
from sports_events_api.app.core.security import hash_password


def main():
    ap = argparse.ArgumentParser(description="Reset a user's password (SQLite).")
    ap.add_argument("--db", help="Path to the SQLite DB file; defaults to DATABASE_URL")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if args.db:
        if not os.path.exists(args.db):
            print(f"[!] DB not found: {args.db}", file=sys.stderr)
            sys.exit(1)
        settings.database_url = os.path.abspath(args.db)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < settings.min_password_length:
        print(f"[!] Password must be at least {settings.min_password_length} characters.", file=sys.stderr)
        sys.exit(1)

    email = args.email.lower()
    conn = get_connection()
    try:
        row = conn.execute("SELECT id FROM users WHERE email = ?", (email,)).fetchone()
        if not row:
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            sys.exit(2)
        now = utcnow()
        conn.execute(
            "UPDATE users SET password = ?, updated_at = ? WHERE id = ?",
            (hash_password(new_password), now, row["id"]),
        )
        conn.execute(
            "UPDATE sessions SET revoked_at = ? WHERE user_id = ? AND revoked_at IS NULL",
            (now, row["id"]),
        )
        conn.commit()
        print(f"[+] Password updated for user: {email}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
