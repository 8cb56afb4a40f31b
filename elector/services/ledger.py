from sqlalchemy.exc import IntegrityError

from elector.errors import AlreadyVoted
from elector.extensions import db
from elector.models import Ballot


def has_voted(election_id, voter):
    return (
        Ballot.query.filter_by(election_id=election_id, voter=voter).first()
        is not None
    )


def ballot_count(election_id):
    return Ballot.query.filter_by(election_id=election_id).count()


def record_ballot(election_id, voter, now):
    db.session.add(Ballot(election_id=election_id, voter=voter, cast_at=now))
    try:
        db.session.flush()
    except IntegrityError as exc:
        # Another process committed a ballot for the same pair first.
        raise AlreadyVoted(election_id=election_id, voter=voter) from exc
