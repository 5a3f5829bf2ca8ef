import json
from datetime import datetime
from models.db import db


class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=True, index=True)  # null for anonymous and CLI events
    action = db.Column(db.String(80), nullable=False, index=True)  # BOOKING_CREATE, BOOKING_DENIED, SLOT_CANCEL...
    entity = db.Column(db.String(80), nullable=True)
    entity_id = db.Column(db.String(80), nullable=True)

    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    metadata_json = db.Column(db.Text, nullable=True)

    timestamp = db.Column(db.DateTime, default=datetime.now, nullable=False)

    @property
    def event_metadata(self) -> dict:
        return json.loads(self.metadata_json) if self.metadata_json else {}

    @event_metadata.setter
    def event_metadata(self, value):
        self.metadata_json = json.dumps(value, default=str) if value else None

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "action": self.action,
            "entity": self.entity,
            "entityId": self.entity_id,
            "metadata": self.event_metadata,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
