"""
Seed roles and, optionally, the first super admin. Run from project root:
  python -m app.scripts.seed [--admin-email EMAIL --admin-password PASSWORD]
Without flags the admin credentials come from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD.
Safe to run repeatedly.
"""
import argparse
import sys

from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import SessionLocal
from app.models.role import RoleName
from app.services.password import get_password_hasher
from app.services.user_store import UserStore


def seed(db: Session, admin_email: str = "", admin_password: str = "") -> list[str]:
    """Upsert the roles and the optional admin. Returns a line per action taken."""
    store = UserStore(db)
    actions = []
    roles = {}
    for name in RoleName:
        existed = store.find_role_by_name(name.value) is not None
        roles[name] = store.get_or_create_role(name.value)
        if not existed:
            actions.append(f"Created role '{name.value}'.")

    if admin_email and admin_password:
        if store.find_by_email(admin_email) is None:
            password_hash = get_password_hasher().hash(admin_password)
            store.create(admin_email, password_hash, role_id=roles[RoleName.SUPER_ADMIN].id)
            actions.append(f"Created super admin '{admin_email}'.")
    return actions


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed Authkeeper roles and the first admin.")
    parser.add_argument("--admin-email", default=settings.SEED_ADMIN_EMAIL)
    parser.add_argument("--admin-password", default=settings.SEED_ADMIN_PASSWORD)
    args = parser.parse_args()

    if bool(args.admin_email) != bool(args.admin_password):
        print("Admin email and password must be given together.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        for line in seed(db, args.admin_email, args.admin_password):
            print(line)
        print("Seed complete.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
