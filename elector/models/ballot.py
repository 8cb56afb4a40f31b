from elector.config import MAX_LABEL_LENGTH
from elector.extensions import db


class Ballot(db.Model):
    __tablename__ = "ballots"
    __table_args__ = (
        db.UniqueConstraint("election_id", "voter", name="uq_ballot_election_voter"),
    )

    id = db.Column(db.Integer, primary_key=True)
    election_id = db.Column(db.Integer, db.ForeignKey("elections.id"), nullable=False)
    voter = db.Column(db.String(MAX_LABEL_LENGTH), nullable=False)
    cast_at = db.Column(db.BigInteger, nullable=False)
