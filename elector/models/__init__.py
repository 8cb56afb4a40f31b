from elector.models.audit_event import AuditEvent
from elector.models.ballot import Ballot
from elector.models.ciphertext import Ciphertext
from elector.models.election import Election
from elector.models.option import ElectionOption
from elector.models.tally import Tally

__all__ = [
    "AuditEvent",
    "Ballot",
    "Ciphertext",
    "Election",
    "ElectionOption",
    "Tally",
]
