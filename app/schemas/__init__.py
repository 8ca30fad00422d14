"""
app/schemas package marker.
"""

from app.schemas.observation_record import ObservationRecordSchema

__all__ = [
    "ObservationRecordSchema",
]
