"""Print a long-lived bearer token for an existing account.

Usage:
    python create_token.py admin@pettrader.co.za [days]
"""
import sys

from pet_market_api.app.core.db import init_db
from pet_market_api.app.core.identity import identity_provider


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__, file=sys.stderr)
        sys.exit(1)
    email = sys.argv[1]
    days = int(sys.argv[2]) if len(sys.argv) > 2 else 365

    init_db()
    identity = identity_provider.find_by_email(email)
    if identity is None:
        print(f"[!] No account found with email: {email}", file=sys.stderr)
        sys.exit(2)
    print(identity_provider.issue_token(identity, expires_delta=days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
