"""Management CLI.

Usage:
    python -m shiptrack.cli list-users                 # Show all users and roles
    python -m shiptrack.cli set-role <email> <ROLE>    # ADMIN | OPERATOR | VIEWER
    python -m shiptrack.cli issue-token <user_id> <email>
                                                       # Dev bearer token
"""

import sys

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from shiptrack.auth.jwt import create_access_token
from shiptrack.config import settings
from shiptrack.models.user import User, UserRole


def _session() -> Session:
    return Session(create_engine(settings.database_url_sync))


def list_users():
    with _session() as session:
        users = session.execute(select(User).order_by(User.created_at)).scalars().all()
        for u in users:
            print(f"  {u.role.value:<9} {u.email or '-':<40} {u.id}")
        print(f"\n{len(users)} user(s)")


def set_role(email: str, role: str) -> int:
    try:
        new_role = UserRole(role.upper())
    except ValueError:
        print(f"Unknown role: {role} (expected ADMIN, OPERATOR or VIEWER)")
        return 1

    with _session() as session:
        user = session.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()
        if user is None:
            print(f"No user with e-mail {email}. They must sign in once first.")
            return 1
        user.role = new_role
        session.commit()
    print(f"  {email} is now {new_role.value}")
    return 0


def issue_token(user_id: str, email: str):
    print(create_access_token(user_id, email=email))


if __name__ == "__main__":
    cmd = sys.argv[1] if len(sys.argv) > 1 else ""
    args = sys.argv[2:]
    if cmd == "list-users":
        list_users()
    elif cmd == "set-role" and len(args) == 2:
        sys.exit(set_role(*args))
    elif cmd == "issue-token" and len(args) == 2:
        issue_token(*args)
    else:
        print("Usage: python -m shiptrack.cli [list-users|set-role <email> <ROLE>|issue-token <user_id> <email>]")
        sys.exit(1)
