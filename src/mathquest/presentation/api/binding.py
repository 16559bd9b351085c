"""Lenient binding of optional numeric identifiers.

Browser clients frequently send ``?roleId=undefined`` or ``?roleId=null``
when a value is absent. Those, and any other unparseable value, bind to
``None`` instead of failing the request.
"""

import logging
import re
from typing import Annotated, Any, Optional

from fastapi import Depends, Query

logger = logging.getLogger(__name__)

ABSENT_MARKERS = frozenset({"undefined", "null"})
_INTEGER = re.compile(r"[+-]?\d+")


def parse_optional_id(raw: Optional[str], name: str = "id") -> Optional[int]:
    """Parse an optional integer id.

    Parameters
    ----------
    raw
        The raw query or path value
    name
        Parameter name, used in the warning for unparseable values

    Returns
    -------
    The parsed integer, or None when the value is absent, blank,
    ``undefined``/``null`` (any case), or not a number
    """
    if raw is None:
        return None

    text = raw.strip()
    if not text or text.lower() in ABSENT_MARKERS:
        return None

    if not _INTEGER.fullmatch(text):
        logger.warning("Could not convert %s=%r to a number, using None", name, raw)
        return None
    return int(text)


def optional_id_query(name: str) -> Any:
    """Dependency binding query parameter ``name`` with ``parse_optional_id``."""

    def dependency(
        value: Annotated[Optional[str], Query(alias=name)] = None,
    ) -> Optional[int]:
        return parse_optional_id(value, name)

    return Depends(dependency)
