from importlib import import_module

from flask import current_app

from elector.fhe.base import EncryptedArithmetic, ExternalInput, InputContext

BACKENDS = {
    "mock": "elector.fhe.mock:MockArithmetic",
}


def _load_backend_class(name):
    target = BACKENDS.get(name, name)
    module_name, _, attr = target.partition(":")
    if not attr:
        raise RuntimeError(f"FHE_BACKEND must be 'module:Class' or a known alias, got {name!r}")
    return getattr(import_module(module_name), attr)


def init_arithmetic(app):
    backend_cls = _load_backend_class(app.config["FHE_BACKEND"])
    secret = app.config["FHE_PROOF_SECRET"] or app.config["SECRET_KEY"]
    app.extensions["elector.arithmetic"] = backend_cls(secret)
    app.logger.debug("Encrypted arithmetic backend: %s", backend_cls.__name__)


def get_arithmetic():
    return current_app.extensions["elector.arithmetic"]


__all__ = [
    "EncryptedArithmetic",
    "ExternalInput",
    "InputContext",
    "get_arithmetic",
    "init_arithmetic",
]
