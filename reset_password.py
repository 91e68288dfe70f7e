#!/usr/bin/env python3
"""
Reset an account's password in the Pet Market SQLite database.

This script does not read or reveal any existing password.  It sets a
new PBKDF2-HMAC-SHA256 hash for the account with the given email.

Usage:
    python reset_password.py --db ./pet_market_api/pet_market.db --email admin@pettrader.co.za --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from pet_market_api.app.core.config import settings
from pet_market_api.app.core.identity import identity_provider
from pet_market_api.app.services.user_service import MIN_PASSWORD_LENGTH


def main():
    ap = argparse.ArgumentParser(description="Reset a Pet Market account password (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file. Defaults to DATABASE_URL.")
    ap.add_argument("--email", required=True, help="Account email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if args.db:
        if not os.path.exists(args.db):
            print(f"[!] DB not found: {args.db}", file=sys.stderr)
            sys.exit(1)
        settings.database_url = os.path.abspath(args.db)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        print(f"[!] Password must be at least {MIN_PASSWORD_LENGTH} characters.", file=sys.stderr)
        sys.exit(1)

    if not identity_provider.set_password(args.email, new_password):
        print(f"[!] No account found with email: {args.email}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] Password updated for: {args.email}")


if __name__ == "__main__":
    main()
