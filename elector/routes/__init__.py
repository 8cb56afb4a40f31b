from elector.routes.elections import register_election_routes


def register_routes(app):
    register_election_routes(app)
