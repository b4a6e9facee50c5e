"""
Command line tools for SnapServe operators.

Usage:
    snapserve create-admin admin@pizza.com 'Secr3t!pass' --restaurant-name "Pizza Place" --verified --active
    snapserve sweep-invitations
"""

import argparse
import logging
import sys
from typing import List, Optional

from snapserve.core.exceptions import SnapServeError
from snapserve.db.session import SessionLocal, commit_or_raise
from snapserve.services.admin_service import AdminService
from snapserve.services.invitation_service import StaffInvitationService
from snapserve.utils.validation import PASSWORD_MIN_LENGTH, validate_email_format

logger = logging.getLogger(__name__)


def create_admin(args: argparse.Namespace) -> int:
    """Create an admin user and their restaurant."""
    if not validate_email_format(args.email):
        print(f"Invalid email address: {args.email}", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LENGTH:
        print(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        admin = AdminService.create_admin(
            db,
            email=args.email,
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            restaurant_name=args.restaurant_name,
            is_active=args.active,
            is_verified=args.verified,
        )
        commit_or_raise(db)
        db.refresh(admin)
    except SnapServeError as e:
        print(f"Could not create admin: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Admin created: {admin.email} (id={admin.id})")
    print(f"  Restaurant: {args.restaurant_name}")
    print(f"  Active: {'yes' if args.active else 'no'}")
    print(f"  Verified: {'yes' if args.verified else 'no'}")
    return 0


def sweep_invitations(args: argparse.Namespace) -> int:
    """Expire every pending invitation past its expiry."""
    db = SessionLocal()
    try:
        count = StaffInvitationService.sweep_expired(db, restaurant_id=args.restaurant_id)
    finally:
        db.close()
    print(f"Expired {count} invitation(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snapserve", description="SnapServe management commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    admin = subparsers.add_parser("create-admin", help="Create an admin user and restaurant")
    admin.add_argument("email", help="Admin email address")
    admin.add_argument("password", help="Admin password")
    admin.add_argument("--restaurant-name", default="Test Restaurant")
    admin.add_argument("--first-name", default="John")
    admin.add_argument("--last-name", default="Doe")
    admin.add_argument("--verified", action="store_true", help="Mark the email as verified")
    admin.add_argument("--active", action="store_true", help="Activate the account immediately")
    admin.set_defaults(func=create_admin)

    sweep = subparsers.add_parser("sweep-invitations", help="Expire stale staff invitations")
    sweep.add_argument("--restaurant-id", type=int, default=None)
    sweep.set_defaults(func=sweep_invitations)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
