"""Error kinds raised by the election engine and rendered by the API.

Every error is reported synchronously to the caller and leaves no partial
state behind; none of them is retried by the engine itself.
"""


class ElectionError(Exception):
    code = "ElectionError"
    status_code = 400
    message = "Election operation failed."

    def __init__(self, message=None, **details):
        super().__init__(message or self.message)
        self.details = details

    def to_dict(self):
        payload = {"ok": False, "error": self.code, "message": str(self)}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRequest(ElectionError):
    code = "InvalidRequest"
    message = "Request payload is malformed."


class InvalidOptionCount(ElectionError):
    code = "InvalidOptionCount"
    message = "An election needs between 2 and 8 options."


class EmptyLabel(ElectionError):
    code = "EmptyLabel"
    message = "Election name and option labels must not be empty."


class LabelTooLong(ElectionError):
    code = "LabelTooLong"
    message = "Election name and option labels are limited to 200 characters."


class InvalidEndTime(ElectionError):
    code = "InvalidEndTime"
    message = "Closing time must be in the future."


class ElectionNotFound(ElectionError):
    code = "ElectionNotFound"
    status_code = 404
    message = "Election does not exist."


class InvalidOptionIndex(ElectionError):
    code = "InvalidOptionIndex"
    status_code = 404
    message = "Option index is out of range."


class ElectionClosed(ElectionError):
    code = "ElectionClosed"
    status_code = 409
    message = "Voting for this election has closed."


class ElectionOngoing(ElectionError):
    code = "ElectionOngoing"
    status_code = 409
    message = "Election is still open for voting."


class AlreadyFinalized(ElectionError):
    code = "AlreadyFinalized"
    status_code = 409
    message = "Election has already been finalized."


class AlreadyVoted(ElectionError):
    code = "AlreadyVoted"
    status_code = 409
    message = "This identity has already voted in this election."


class InvalidProof(ElectionError):
    code = "InvalidProof"
    status_code = 422
    message = "Encrypted input failed proof verification."


class TallyConflict(ElectionError):
    code = "TallyConflict"
    status_code = 409
    message = "Tallies kept changing under this vote; try again."


class DecryptionNotAllowed(ElectionError):
    code = "DecryptionNotAllowed"
    status_code = 403
    message = "Ciphertext is not publicly revealable."


def register_error_handlers(app):
    @app.errorhandler(ElectionError)
    def handle_election_error(error):
        return error.to_dict(), error.status_code
