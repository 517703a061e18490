# seed_user.py
import os
from configs import db
from db.models.user import User, UserRole
from app import app

DEFAULT_USERS = [
    ("admin", "System Admin", UserRole.ADMIN),
    ("operator1", "Petugas Timbang", UserRole.OPERATOR),
]


def seed_users(password=None):
    password = password or os.getenv("SEED_PASSWORD", "1")
    added = 0
    for username, full_name, role in DEFAULT_USERS:
        if User.query.filter_by(username=username).first():
            continue
        u = User(username=username, full_name=full_name, role=role, is_active=True)
        u.set_password(password)
        db.session.add(u)
        added += 1
    db.session.commit()
    print(f"✅ Seeded {added} user(s)")


if __name__ == "__main__":
    with app.app_context():
        db.create_all()
        seed_users()
