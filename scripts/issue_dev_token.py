"""
Issue a bearer token for a local user, creating the user if needed.

Usage:
    python scripts/issue_dev_token.py guest@example.com
    python scripts/issue_dev_token.py host@example.com --host
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import structlog

from homestay.auth import create_access_token
from homestay.db.engine import engine
from homestay.db.readers.users import get_user_by_email
from homestay.db.writers.users import insert_user
from homestay.logging_config import setup_logging
from homestay.utils.datetime import utc_now

setup_logging()
logger = structlog.get_logger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("email")
    parser.add_argument("--host", action="store_true", help="Create the user as a host")
    parser.add_argument("--admin", action="store_true", help="Create the user as an admin")
    args = parser.parse_args()

    with engine.begin() as conn:
        user = get_user_by_email(conn, args.email)
        if user:
            user_id = user["id"]
        else:
            values = {"email": args.email, "first_name": args.email.split("@")[0]}
            if args.host:
                values.update(is_host=True, role="host", host_since=utc_now())
            if args.admin:
                values["is_admin"] = True
            user_id = insert_user(conn, values)
            logger.info("dev_user_created", user_id=user_id, email=args.email)

    print(create_access_token(user_id))


if __name__ == "__main__":
    main()
