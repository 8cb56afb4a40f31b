from flask import Flask

from elector.commands import register_commands
from elector.config import Config
from elector.errors import register_error_handlers
from elector.extensions import db, login_manager, migrate
from elector.fhe import init_arithmetic
from elector.routes import register_routes
from elector.services.identity import load_caller_from_request
from elector.services.locks import ElectionLocks


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.request_loader(load_caller_from_request)

    @login_manager.unauthorized_handler
    def unauthorized():
        return {"ok": False, "error": "Unauthenticated", "message": "Caller identity is required."}, 401

    app.extensions["elector.locks"] = ElectionLocks()
    init_arithmetic(app)

    register_error_handlers(app)
    register_routes(app)
    register_commands(app)
    return app


__all__ = ["db", "migrate", "create_app"]
