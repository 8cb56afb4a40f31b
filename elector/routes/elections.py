from flask import request
from flask_login import current_user, login_required

from elector.errors import InvalidRequest
from elector.services.engine import get_engine


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest("Expected a JSON object body.")
    return data


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_create_payload(data):
    name = data.get("name")
    options = data.get("options")
    end_time = data.get("end_time")

    if not isinstance(name, str):
        raise InvalidRequest("'name' must be a string.")
    if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
        raise InvalidRequest("'options' must be a list of strings.")
    if not _is_int(end_time):
        raise InvalidRequest("'end_time' must be an integer unix timestamp.")
    return name, options, end_time


def register_election_routes(app):
    @app.route("/elections", methods=["POST"])
    @login_required
    def create_election():
        name, options, end_time = _parse_create_payload(_json_body())
        election_id = get_engine().create_election(current_user.id, name, options, end_time)
        return {"ok": True, "election_id": election_id}, 201

    @app.route("/elections")
    def list_elections():
        engine = get_engine()
        return {"count": engine.election_count(), "elections": engine.list_elections()}

    @app.route("/elections/<int:election_id>")
    def election_detail(election_id):
        return get_engine().get_election(election_id)

    @app.route("/elections/<int:election_id>/votes", methods=["POST"])
    @login_required
    def cast_vote(election_id):
        data = _json_body()
        handle = data.get("handle")
        proof = data.get("proof")
        if not isinstance(handle, str) or not isinstance(proof, str):
            raise InvalidRequest("'handle' and 'proof' must be strings.")

        get_engine().vote(current_user.id, election_id, handle, proof)
        return {"ok": True}, 201

    @app.route("/elections/<int:election_id>/finalize", methods=["POST"])
    @login_required
    def finalize_election(election_id):
        get_engine().finalize(current_user.id, election_id)
        return {"ok": True}

    @app.route("/elections/<int:election_id>/tallies/<int(signed=True):option_index>")
    def election_tally(election_id, option_index):
        engine = get_engine()
        handle = engine.get_tally(election_id, option_index)
        return {
            "election_id": election_id,
            "option_index": option_index,
            "handle": handle,
            "revealable": engine.is_tally_revealable(election_id, option_index),
        }

    @app.route(
        "/elections/<int:election_id>/tallies/<int(signed=True):option_index>/revealable"
    )
    def tally_revealable(election_id, option_index):
        revealable = get_engine().is_tally_revealable(election_id, option_index)
        return {"revealable": revealable}

    @app.route("/elections/<int:election_id>/voters/<path:identity>")
    def voter_status(election_id, identity):
        return {"has_voted": get_engine().has_voted(election_id, identity)}

    @app.route("/elections/<int:election_id>/events")
    def election_events(election_id):
        return {"events": get_engine().events(election_id)}
