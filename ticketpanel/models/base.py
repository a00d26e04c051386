from __future__ import annotations

import time
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """Epoch milliseconds; the timestamp unit used in every stored document."""
    return int(time.time() * 1000)


class Record(BaseModel):
    """
    Base for JSON records kept inside documents.

    Notes:
    - snake_case in Python, camelCase on the wire and on disk
    - unknown keys are kept so records written by other tools survive a round-trip
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_doc(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Payload(BaseModel):
    """
    Base for request bodies: camelCase accepted, unknown keys dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
