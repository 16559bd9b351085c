"""Auth schemas and data structures.

These are simple data classes used for transferring authentication
data between components.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    Only the subject identity is carried. Roles and account state are
    re-read from the credential store on every request.

    Attributes
    ----------
    subject
        The username the token was issued for
    issued_at
        Token issue timestamp
    exp
        Token expiration timestamp
    """

    subject: str
    issued_at: datetime
    exp: datetime
