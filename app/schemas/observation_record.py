"""
app/schemas/observation_record.py

Validation schema for one parsed observation row.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from clustering.types import Observation


class ObservationRecordSchema(BaseModel):
    """
    One observation as read from the input file.

    ``NaN`` feature values mark missing readings.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )

    identifier: str = Field(min_length=1)
    features: list[float] = Field(min_length=1)

    def to_observation(self) -> Observation:
        return Observation(identifier=self.identifier, features=tuple(self.features))
