from flask import current_app
from flask_login import UserMixin

from elector.config import MAX_LABEL_LENGTH


class Caller(UserMixin):
    """An identity already authenticated by whatever sits in front of us."""

    def __init__(self, identity):
        self.id = identity

    def __repr__(self):
        return f"<Caller {self.id}>"


def load_caller_from_request(request):
    identity = (request.headers.get(current_app.config["IDENTITY_HEADER"]) or "").strip()
    if not identity or len(identity) > MAX_LABEL_LENGTH:
        return None
    return Caller(identity)
