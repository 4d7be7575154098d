"""
签发本地开发用的访问令牌
Mint a development bearer token for the given owner id.
"""
import argparse
import uuid
from datetime import timedelta

from piggybank.core.config import get_settings
from piggybank.core.security import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue a development access token")
    parser.add_argument("--owner-id", default=None, help="owner id placed in the sub claim (random when omitted)")
    parser.add_argument("--minutes", type=int, default=None, help="token lifetime in minutes")
    args = parser.parse_args()

    settings = get_settings()
    owner_id = args.owner_id or str(uuid.uuid4())
    expires = timedelta(minutes=args.minutes) if args.minutes else None

    token = create_access_token(owner_id, settings, expires_delta=expires)
    print(f"owner_id: {owner_id}")
    print(f"token:    {token}")


if __name__ == "__main__":
    main()
