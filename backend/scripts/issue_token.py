"""Mint a custom sign-in token for INITIAL_AUTH_TOKEN.

Usage: python backend/scripts/issue_token.py <uid> [--name "Dr. Smith"] [--ttl 3600]
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Ensure backend path is in sys.path
if os.path.exists("backend"):
    sys.path.append(os.path.join(os.getcwd(), "backend"))
else:
    sys.path.append(os.getcwd())

from portal.domain.identity import issue_custom_token
from portal.settings import load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue a custom sign-in token")
    parser.add_argument("uid")
    parser.add_argument("--name", default=None)
    parser.add_argument("--email", default=None)
    parser.add_argument("--ttl", type=int, default=None, help="lifetime in seconds")
    args = parser.parse_args()

    load_dotenv()
    settings = load_settings()
    claims = {}
    if args.name:
        claims["name"] = args.name
    if args.email:
        claims["email"] = args.email
    if args.ttl is not None:
        claims["ttl_seconds"] = args.ttl
    print(issue_custom_token(settings, args.uid, **claims))


if __name__ == "__main__":
    main()
