from elector.config import MAX_LABEL_LENGTH
from elector.extensions import db


class AuditEvent(db.Model):
    __tablename__ = "audit_events"

    id = db.Column(db.Integer, primary_key=True)
    kind = db.Column(db.String(50), nullable=False)
    election_id = db.Column(db.Integer, db.ForeignKey("elections.id"), nullable=False)
    actor = db.Column(db.String(MAX_LABEL_LENGTH), nullable=False)
    created_at = db.Column(db.BigInteger, nullable=False)
    details = db.Column(db.JSON, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "kind": self.kind,
            "election_id": self.election_id,
            "actor": self.actor,
            "timestamp": self.created_at,
            "details": self.details or {},
        }
