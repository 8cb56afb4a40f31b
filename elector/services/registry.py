import enum

from elector.config import MAX_LABEL_LENGTH, MAX_OPTIONS, MIN_OPTIONS
from elector.errors import (
    AlreadyFinalized,
    ElectionClosed,
    ElectionNotFound,
    ElectionOngoing,
    EmptyLabel,
    InvalidEndTime,
    InvalidOptionCount,
    InvalidOptionIndex,
    LabelTooLong,
)
from elector.extensions import db
from elector.models import Election, ElectionOption


class ElectionState(enum.Enum):
    OPEN = "Open"
    AWAITING_FINALIZATION = "AwaitingFinalization"
    FINALIZED = "Finalized"


# Operation -> state it is allowed in, and the state it leads to.
TRANSITIONS = {
    "vote": (ElectionState.OPEN, ElectionState.OPEN),
    "finalize": (ElectionState.AWAITING_FINALIZATION, ElectionState.FINALIZED),
}


def election_state(end_time, finalized, now):
    if finalized:
        return ElectionState.FINALIZED
    if now < end_time:
        return ElectionState.OPEN
    return ElectionState.AWAITING_FINALIZATION


def check_transition(operation, election, now):
    """Return the state ``operation`` leads to, or raise why it is not allowed.

    A vote past the closing time is reported as closed before the finalized
    flag is looked at; finalize reports an unexpired election as ongoing first.
    """
    state = election_state(election.end_time, election.finalized, now)
    allowed_in, leads_to = TRANSITIONS[operation]
    if state is allowed_in:
        return leads_to

    closed = now >= election.end_time
    if operation == "vote":
        error = ElectionClosed if closed else AlreadyFinalized
    else:
        error = AlreadyFinalized if closed else ElectionOngoing
    raise error(election_id=election.id, state=state.value)


def is_blank(value):
    return not (value or "").strip()


def validate_new_election(name, option_labels, end_time, now):
    if not MIN_OPTIONS <= len(option_labels) <= MAX_OPTIONS:
        raise InvalidOptionCount(count=len(option_labels))
    if is_blank(name) or any(is_blank(label) for label in option_labels):
        raise EmptyLabel()
    if len(name) > MAX_LABEL_LENGTH or any(len(label) > MAX_LABEL_LENGTH for label in option_labels):
        raise LabelTooLong(limit=MAX_LABEL_LENGTH)
    if end_time <= now:
        raise InvalidEndTime(end_time=end_time, now=now)


def add_election(name, option_labels, end_time, creator, now):
    election = Election(
        name=name,
        end_time=end_time,
        created_at=now,
        creator=creator,
        finalized=False,
    )
    db.session.add(election)
    for position, label in enumerate(option_labels):
        election.options.append(ElectionOption(position=position, label=label))
    db.session.flush()
    return election


def get_election(election_id, for_update=False):
    if for_update:
        # Row lock held until commit; serializes mutations of one election
        # across workers. SQLite ignores it and relies on its database lock.
        election = (
            Election.query.filter_by(id=election_id)
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )
    else:
        election = db.session.get(Election, election_id)
    if election is None:
        raise ElectionNotFound(election_id=election_id)
    return election


def election_count():
    return Election.query.count()


def list_elections():
    return Election.query.order_by(Election.id).all()


def check_option_index(election, option_index):
    if not 0 <= option_index < len(election.options):
        raise InvalidOptionIndex(election_id=election.id, option_index=option_index)


def mark_finalized(election_id):
    """Flip the finalized flag; False if someone else already did."""
    updated = (
        Election.query.filter_by(id=election_id, finalized=False)
        .update({"finalized": True}, synchronize_session="fetch")
    )
    return updated == 1


def election_to_dict(election, now):
    return {
        "id": election.id,
        "name": election.name,
        "options": election.option_labels,
        "option_count": len(election.options),
        "end_time": election.end_time,
        "created_at": election.created_at,
        "creator": election.creator,
        "finalized": election.finalized,
        "status": election_state(election.end_time, election.finalized, now).value,
    }
