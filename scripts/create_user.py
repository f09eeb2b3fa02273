"""Create a portal login account from the command line.

Usage: python -m scripts.create_user <username> <password> [coordinator|admin|student]
"""
import sys

from sqlalchemy import select

from app.core.database import SessionLocal
from app.core.security import hash_password
from app.models.user import User, UserRole

if len(sys.argv) < 3:
    print(__doc__)
    sys.exit(1)

username, password = sys.argv[1], sys.argv[2]
role = UserRole(sys.argv[3]) if len(sys.argv) > 3 else UserRole.COORDINATOR

db = SessionLocal()
try:
    if db.execute(select(User).where(User.username == username)).scalar_one_or_none():
        print(f"User '{username}' already exists")
        sys.exit(1)
    db.add(User(username=username, password_hash=hash_password(password), role=role, is_active=True))
    db.commit()
    print(f"Created {role.value} '{username}'")
finally:
    db.close()
