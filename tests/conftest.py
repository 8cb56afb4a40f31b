from pathlib import Path
import sys
import os

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Safety default for any module-level app creation during test imports.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from elector import create_app
from elector.extensions import db
from elector.fhe import InputContext, get_arithmetic
from elector.services.engine import get_engine

START_TIME = 1_700_000_000


class FrozenClock:
    def __init__(self, now=START_TIME):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def clock():
    return FrozenClock()


def _test_config(db_file, clock):
    return {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
        "SQLALCHEMY_ENGINE_OPTIONS": {},
        "SECRET_KEY": "test-secret",
        "ELECTION_CLOCK": clock,
    }


@pytest.fixture()
def app(tmp_path: Path, clock):
    app = create_app(_test_config(tmp_path / "test.sqlite3", clock))

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def second_app(app, tmp_path: Path, clock):
    """A second worker: its own app, engine, backend and locks, same database."""
    return create_app(_test_config(tmp_path / "test.sqlite3", clock))


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        yield db.session


@pytest.fixture()
def engine(app):
    return get_engine()


@pytest.fixture()
def arithmetic(app):
    return get_arithmetic()


@pytest.fixture()
def encrypt_choice(engine, arithmetic):
    def _encrypt(voter, election_id, choice):
        election = engine.get_election(election_id)
        context = InputContext(
            election_id=election_id, caller=voter, bound=election["option_count"]
        )
        encrypted = arithmetic.encrypt_input(choice, context)
        db.session.commit()
        return encrypted

    return _encrypt


@pytest.fixture()
def cast_vote(engine, encrypt_choice):
    def _cast(voter, election_id, choice):
        encrypted = encrypt_choice(voter, election_id, choice)
        engine.vote(voter, election_id, encrypted.handle, encrypted.proof)

    return _cast


@pytest.fixture()
def revealed_tallies(engine, arithmetic):
    def _reveal(election_id):
        count = engine.get_election(election_id)["option_count"]
        return [
            arithmetic.public_decrypt(engine.get_tally(election_id, index))
            for index in range(count)
        ]

    return _reveal


@pytest.fixture()
def open_election(engine, clock):
    def _open(options=("Yes", "No"), duration=60, creator="creator", name="Policy Vote"):
        return engine.create_election(creator, name, list(options), clock() + duration)

    return _open
