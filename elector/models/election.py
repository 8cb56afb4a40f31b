from elector.config import MAX_LABEL_LENGTH
from elector.extensions import db


class Election(db.Model):
    __tablename__ = "elections"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(MAX_LABEL_LENGTH), nullable=False)
    end_time = db.Column(db.BigInteger, nullable=False)
    created_at = db.Column(db.BigInteger, nullable=False)
    creator = db.Column(db.String(MAX_LABEL_LENGTH), nullable=False)
    finalized = db.Column(db.Boolean, nullable=False, default=False)

    options = db.relationship(
        "ElectionOption",
        backref="election",
        lazy=True,
        order_by="ElectionOption.position",
    )

    @property
    def option_labels(self):
        return [option.label for option in self.options]
