from datetime import datetime
from models.db import db

# Ordered lowest -> highest; a role satisfies every level at or below it
ROLE_HIERARCHY = {
    "member": 1,
    "host": 2,
    "admin": 3,
    "superadmin": 4,
}


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(30), nullable=False)

    role = db.Column(db.String(20), nullable=False, default="member")
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    def has_role(self, required: str) -> bool:
        return ROLE_HIERARCHY.get(self.role, 0) >= ROLE_HIERARCHY[required]
