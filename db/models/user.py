# db/models/user.py
import enum
from datetime import datetime
from configs import db
from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash


class UserRole(enum.Enum):
    ADMIN = "ADMIN"
    OPERATOR = "OPERATOR"  # petugas timbang


class User(db.Model, UserMixin):
    __tablename__ = "user_account"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.OPERATOR, nullable=False)
    last_login_at = db.Column(db.DateTime)

    def __str__(self):
        return self.full_name or self.username

    def get_id(self):
        return str(self.id)

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return bool(self.password_hash) and check_password_hash(self.password_hash, password)

    def has_role(self, *roles: UserRole):
        """True if the user holds any of the given roles."""
        return self.role in roles
