from elector.config import MAX_LABEL_LENGTH
from elector.extensions import db


class ElectionOption(db.Model):
    __tablename__ = "election_options"
    __table_args__ = (
        db.UniqueConstraint("election_id", "position", name="uq_election_option_position"),
    )

    id = db.Column(db.Integer, primary_key=True)
    election_id = db.Column(db.Integer, db.ForeignKey("elections.id"), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    label = db.Column(db.String(MAX_LABEL_LENGTH), nullable=False)
