from elector.extensions import db


class Tally(db.Model):
    """Encrypted accumulator for one option; the handle is opaque to us.

    ``version`` makes every handle write conditional on the version that was
    read, so two workers adding to the same stale handle cannot both commit.
    """

    __tablename__ = "tallies"
    __table_args__ = (
        db.UniqueConstraint("election_id", "option_index", name="uq_tally_election_option"),
    )

    id = db.Column(db.Integer, primary_key=True)
    election_id = db.Column(db.Integer, db.ForeignKey("elections.id"), nullable=False)
    option_index = db.Column(db.Integer, nullable=False)
    handle = db.Column(db.String(66), nullable=False)
    version = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
