from datetime import datetime, timedelta
from models.db import db


class Session(db.Model):
    """Server-side login session. The cookie carries the raw token, this row only its hash."""
    __tablename__ = "sessions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    token_hash = db.Column(db.String(128), unique=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)
    last_seen_at = db.Column(db.DateTime, nullable=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    revoked = db.Column(db.Boolean, default=False, nullable=False)

    # client fingerprint at login time, for the audit trail
    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)

    @classmethod
    def open(cls, user_id: int, token_hash: str, now: datetime, lifetime_seconds: int, ip=None, user_agent=None):
        return cls(
            user_id=user_id,
            token_hash=token_hash,
            created_at=now,
            last_seen_at=now,
            expires_at=now + timedelta(seconds=lifetime_seconds),
            revoked=False,
            ip=ip,
            user_agent=(user_agent or "")[:255] or None,
        )

    def is_usable(self, now: datetime, idle_seconds: int) -> bool:
        """False once revoked, past the hard expiry, or idle for idle_seconds."""
        if self.revoked or self.expires_at <= now:
            return False
        last_seen = self.last_seen_at or self.created_at
        return now < last_seen + timedelta(seconds=idle_seconds)

    def touch(self, now: datetime):
        self.last_seen_at = now
