import pytest


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


def _invoke(runner, *args):
    return runner.invoke(args=["elections", *args])


def test_create_list_vote_finalize_decrypt(runner, clock):
    result = _invoke(
        runner, "create", "--name", "Policy Vote", "--options", "A, B ,,C", "--duration", "60", "--as", "owner"
    )
    assert result.exit_code == 0, result.output
    assert "Election 1 created" in result.output

    listing = _invoke(runner, "list")
    assert "Total elections: 1" in listing.output
    assert '#1 "Policy Vote" options=3' in listing.output

    for voter in ("alice", "bob"):
        vote = _invoke(runner, "vote", "--id", "1", "--choice", "1", "--as", voter)
        assert vote.exit_code == 0, vote.output
        assert "Vote stored successfully" in vote.output

    early = _invoke(runner, "decrypt-tallies", "--id", "1")
    assert early.exit_code != 0
    assert "DecryptionNotAllowed" in early.output

    clock.advance(120)
    finalize = _invoke(runner, "finalize", "--id", "1", "--as", "anyone")
    assert finalize.exit_code == 0, finalize.output

    decrypted = _invoke(runner, "decrypt-tallies", "--id", "1")
    assert decrypted.exit_code == 0, decrypted.output
    assert 'Option[0] "A" -> 0' in decrypted.output
    assert 'Option[1] "B" -> 2' in decrypted.output
    assert 'Option[2] "C" -> 0' in decrypted.output


def test_create_requires_two_options(runner):
    result = _invoke(runner, "create", "--name", "X", "--options", "A,", "--duration", "60", "--as", "owner")

    assert result.exit_code != 0
    assert "at least two options" in result.output


def test_create_requires_positive_duration(runner):
    result = _invoke(runner, "create", "--name", "X", "--options", "A,B", "--duration", "0", "--as", "owner")

    assert result.exit_code != 0
    assert "--duration must be a positive integer" in result.output


def test_engine_errors_surface_as_cli_errors(runner):
    result = _invoke(runner, "finalize", "--id", "5", "--as", "owner")

    assert result.exit_code == 1
    assert "ElectionNotFound" in result.output
