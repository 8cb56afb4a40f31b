import pytest

from elector.errors import (
    AlreadyFinalized,
    AlreadyVoted,
    ElectionClosed,
    ElectionNotFound,
    InvalidProof,
)
from elector.models import Ballot


def _handles(engine, election_id):
    count = engine.get_election(election_id)["option_count"]
    return [engine.get_tally(election_id, index) for index in range(count)]


def test_has_voted_only_after_accepted_vote(engine, open_election, cast_vote):
    election_id = open_election()
    assert engine.has_voted(election_id, "alice") is False

    cast_vote("alice", election_id, 1)

    assert engine.has_voted(election_id, "alice") is True
    assert engine.has_voted(election_id, "bob") is False


def test_vote_touches_every_accumulator(engine, open_election, cast_vote):
    election_id = open_election(options=["A", "B", "C", "D"])
    before = _handles(engine, election_id)

    cast_vote("alice", election_id, 2)

    after = _handles(engine, election_id)
    assert all(old != new for old, new in zip(before, after))


def test_second_vote_is_rejected(engine, open_election, cast_vote):
    election_id = open_election()
    cast_vote("alice", election_id, 1)

    with pytest.raises(AlreadyVoted):
        cast_vote("alice", election_id, 1)


def test_second_vote_with_other_choice_does_not_change_tally(
    engine, open_election, cast_vote, clock, revealed_tallies
):
    election_id = open_election(options=["Yes", "No"])
    cast_vote("alice", election_id, 0)
    handles = _handles(engine, election_id)

    with pytest.raises(AlreadyVoted):
        cast_vote("alice", election_id, 1)
    assert _handles(engine, election_id) == handles

    clock.advance(60)
    engine.finalize("alice", election_id)
    assert revealed_tallies(election_id) == [1, 0]


def test_vote_on_unknown_election(engine, encrypt_choice, open_election):
    election_id = open_election()
    encrypted = encrypt_choice("alice", election_id, 0)

    with pytest.raises(ElectionNotFound):
        engine.vote("alice", election_id + 1, encrypted.handle, encrypted.proof)


@pytest.mark.parametrize("delay", [60, 61, 3600])
def test_vote_after_closing_time(engine, open_election, encrypt_choice, clock, delay):
    election_id = open_election(duration=60)
    encrypted = encrypt_choice("alice", election_id, 0)
    clock.advance(delay)

    with pytest.raises(ElectionClosed):
        engine.vote("alice", election_id, encrypted.handle, encrypted.proof)
    assert engine.has_voted(election_id, "alice") is False


def test_vote_one_second_before_closing(engine, open_election, cast_vote, clock):
    election_id = open_election(duration=60)
    clock.advance(59)

    cast_vote("alice", election_id, 0)
    assert engine.has_voted(election_id, "alice") is True


def test_vote_on_finalized_election(engine, open_election, encrypt_choice, clock):
    election_id = open_election(duration=60)
    encrypted = encrypt_choice("alice", election_id, 0)
    clock.advance(60)
    engine.finalize("bob", election_id)

    with pytest.raises(ElectionClosed):
        engine.vote("alice", election_id, encrypted.handle, encrypted.proof)

    # Only reachable if the clock goes backwards after finalization.
    clock.advance(-120)
    with pytest.raises(AlreadyFinalized):
        engine.vote("alice", election_id, encrypted.handle, encrypted.proof)


def test_invalid_proof_leaves_no_partial_state(
    engine, open_election, encrypt_choice, db_session
):
    election_id = open_election()
    encrypted = encrypt_choice("alice", election_id, 1)
    handles = _handles(engine, election_id)

    # Proof bound to alice, submitted by mallory.
    with pytest.raises(InvalidProof):
        engine.vote("mallory", election_id, encrypted.handle, encrypted.proof)

    assert _handles(engine, election_id) == handles
    assert engine.has_voted(election_id, "mallory") is False
    assert db_session.query(Ballot).count() == 0
    assert [e["kind"] for e in engine.events(election_id)] == ["election_created"]


def test_out_of_range_choice_is_rejected(engine, open_election, encrypt_choice):
    election_id = open_election(options=["Yes", "No"])
    encrypted = encrypt_choice("alice", election_id, 2)

    with pytest.raises(InvalidProof):
        engine.vote("alice", election_id, encrypted.handle, encrypted.proof)
    assert engine.has_voted(election_id, "alice") is False


def test_proof_for_other_election_is_rejected(engine, open_election, encrypt_choice):
    first = open_election()
    second = open_election()
    encrypted = encrypt_choice("alice", first, 0)

    with pytest.raises(InvalidProof):
        engine.vote("alice", second, encrypted.handle, encrypted.proof)


def test_rejected_vote_does_not_burn_the_ballot(engine, open_election, encrypt_choice, cast_vote):
    election_id = open_election()
    encrypted = encrypt_choice("alice", election_id, 0)

    with pytest.raises(InvalidProof):
        engine.vote("alice", election_id, encrypted.handle, "not-a-proof")

    cast_vote("alice", election_id, 0)
    assert engine.has_voted(election_id, "alice") is True


def test_vote_emits_event(engine, open_election, cast_vote, clock):
    election_id = open_election()
    cast_vote("alice", election_id, 1)

    event = engine.events(election_id)[-1]
    assert event["kind"] == "vote_accepted"
    assert event["actor"] == "alice"
    assert event["timestamp"] == clock()
    assert event["details"] == {}
