"""Per-option encrypted accumulators.

Nothing here ever sees a plaintext count. Voting touches every option of the
election the same way, whichever option the ballot actually picked.
"""

from elector.extensions import db
from elector.models import Tally


def _existing(election_id, refresh=False):
    query = Tally.query.filter_by(election_id=election_id).order_by(Tally.option_index)
    if refresh:
        query = query.populate_existing()
    return {tally.option_index: tally for tally in query}


def accumulators(election, arithmetic):
    """All accumulators of ``election`` in option order, freshly read.

    An option that has none yet gets a fresh encrypted zero.
    """
    existing = _existing(election.id, refresh=True)
    result = []
    for option_index in range(len(election.options)):
        tally = existing.get(option_index)
        if tally is None:
            tally = Tally(
                election_id=election.id,
                option_index=option_index,
                handle=arithmetic.encrypted_zero(),
            )
            db.session.add(tally)
        result.append(tally)
    db.session.flush()
    return result


def find_accumulator(election, option_index):
    return _existing(election.id).get(option_index)


def accumulate(tallies, choice, arithmetic):
    one = arithmetic.encrypted_one()
    zero = arithmetic.encrypted_zero()
    # Fixed shape: equality, select and add on every option, no early exit.
    for tally in tallies:
        index = arithmetic.encrypt_constant(tally.option_index)
        is_choice = arithmetic.equals(choice, index)
        increment = arithmetic.select(is_choice, one, zero)
        tally.handle = arithmetic.add(tally.handle, increment)
    # Versioned UPDATE; raises StaleDataError if another worker got there first.
    db.session.flush()


def reveal(tallies, arithmetic):
    for tally in tallies:
        tally.handle = arithmetic.mark_publicly_revealable(tally.handle)
    db.session.flush()
