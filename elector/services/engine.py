"""Election engine: create, vote, finalize and the read side.

Each mutating call runs inside one database transaction and, for vote and
finalize, under the election's own lock. It either commits completely or
rolls back and raises an ``ElectionError``.
"""

import time
from contextlib import contextmanager

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from elector.errors import AlreadyFinalized, AlreadyVoted, ElectionError, TallyConflict
from elector.extensions import db
from elector.fhe import InputContext, get_arithmetic
from elector.models import AuditEvent
from elector.services import ledger, registry, tally_store

EVENT_ELECTION_CREATED = "election_created"
EVENT_VOTE_ACCEPTED = "vote_accepted"
EVENT_ELECTION_FINALIZED = "election_finalized"

# A vote whose tally write lost a race is replayed on fresh state this often.
VOTE_ATTEMPTS = 3


def wall_clock():
    return int(time.time())


class ElectionEngine:
    def __init__(self, arithmetic, locks, clock=None):
        self.arithmetic = arithmetic
        self.locks = locks
        self.clock = clock or wall_clock

    @contextmanager
    def _transaction(self, operation, election_id=None):
        try:
            yield
            db.session.commit()
        except ElectionError as exc:
            db.session.rollback()
            current_app.logger.warning(
                "%s rejected for election %s: %s", operation, election_id, exc.code
            )
            raise
        except Exception:
            db.session.rollback()
            raise

    def _emit(self, kind, election_id, actor, now, **details):
        db.session.add(
            AuditEvent(
                kind=kind,
                election_id=election_id,
                actor=actor,
                created_at=now,
                details=details,
            )
        )

    # -- mutations --

    def create_election(self, caller, name, option_labels, end_time):
        option_labels = list(option_labels)
        now = self.clock()
        with self._transaction("create"):
            registry.validate_new_election(name, option_labels, end_time, now)
            election = registry.add_election(name, option_labels, end_time, caller, now)
            tally_store.accumulators(election, self.arithmetic)
            self._emit(
                EVENT_ELECTION_CREATED,
                election.id,
                caller,
                now,
                name=name,
                option_count=len(option_labels),
                end_time=end_time,
            )
            election_id = election.id

        current_app.logger.info(
            "Election %s created by %s with %s options", election_id, caller, len(option_labels)
        )
        return election_id

    def vote(self, caller, election_id, handle, proof):
        for attempt in range(1, VOTE_ATTEMPTS + 1):
            try:
                with self.locks.hold(election_id), self._transaction("vote", election_id):
                    self._accept_vote(caller, election_id, handle, proof)
                break
            except StaleDataError:
                current_app.logger.warning(
                    "Tally write conflict on election %s (attempt %s of %s)",
                    election_id,
                    attempt,
                    VOTE_ATTEMPTS,
                )
        else:
            raise TallyConflict(election_id=election_id)

        current_app.logger.info("Vote accepted for election %s from %s", election_id, caller)

    def _accept_vote(self, caller, election_id, handle, proof):
        election = registry.get_election(election_id, for_update=True)
        now = self.clock()
        registry.check_transition("vote", election, now)
        if ledger.has_voted(election_id, caller):
            raise AlreadyVoted(election_id=election_id)

        tallies = tally_store.accumulators(election, self.arithmetic)
        context = InputContext(
            election_id=election_id, caller=caller, bound=len(election.options)
        )
        choice = self.arithmetic.import_external(handle, proof, context)
        tally_store.accumulate(tallies, choice, self.arithmetic)
        ledger.record_ballot(election_id, caller, now)
        self._emit(EVENT_VOTE_ACCEPTED, election_id, caller, now)

    def finalize(self, caller, election_id):
        # Anyone may finalize once voting has closed.
        with self.locks.hold(election_id), self._transaction("finalize", election_id):
            election = registry.get_election(election_id, for_update=True)
            now = self.clock()
            registry.check_transition("finalize", election, now)

            tally_store.reveal(tally_store.accumulators(election, self.arithmetic), self.arithmetic)
            if not registry.mark_finalized(election_id):
                raise AlreadyFinalized(election_id=election_id)
            self._emit(
                EVENT_ELECTION_FINALIZED,
                election_id,
                caller,
                now,
                ballots=ledger.ballot_count(election_id),
            )

        current_app.logger.info("Election %s finalized by %s", election_id, caller)

    # -- reads --

    def election_count(self):
        return registry.election_count()

    def get_election(self, election_id):
        return registry.election_to_dict(registry.get_election(election_id), self.clock())

    def list_elections(self):
        now = self.clock()
        return [registry.election_to_dict(e, now) for e in registry.list_elections()]

    def state(self, election_id):
        election = registry.get_election(election_id)
        return registry.election_state(election.end_time, election.finalized, self.clock())

    def get_tally(self, election_id, option_index):
        election = registry.get_election(election_id)
        registry.check_option_index(election, option_index)
        tally = tally_store.find_accumulator(election, option_index)
        return tally.handle if tally is not None else None

    def is_tally_revealable(self, election_id, option_index):
        handle = self.get_tally(election_id, option_index)
        return handle is not None and self.arithmetic.is_publicly_revealable(handle)

    def has_voted(self, election_id, identity):
        registry.get_election(election_id)
        return ledger.has_voted(election_id, identity)

    def events(self, election_id):
        registry.get_election(election_id)
        events = (
            AuditEvent.query.filter_by(election_id=election_id)
            .order_by(AuditEvent.id)
            .all()
        )
        return [event.to_dict() for event in events]


def get_engine():
    return ElectionEngine(
        arithmetic=get_arithmetic(),
        locks=current_app.extensions["elector.locks"],
        clock=current_app.config.get("ELECTION_CLOCK"),
    )
