"""
Standard type definitions for database models.

Provides consistent column types for participant keys, point values and
closed enum tags across all models.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from sqlalchemy import DECIMAL, DateTime, Enum, String
from sqlalchemy.types import TypeDecorator

# Maximum participant key length
MAX_PARTICIPANT_ID_LENGTH = 64

# Point value type for ledger amounts and leg event PV
# Precision: 18 digits total, 4 after decimal point
# Range: up to 99,999,999,999,999.9999
PointValueType = DECIMAL(18, 4)

# Exclusive upper bound of a storable point value magnitude
MAX_POINT_VALUE = Decimal(10) ** 14

# Opaque participant identity assigned at registration
ParticipantIdType = String(MAX_PARTICIPANT_ID_LENGTH)


def enum_column_type(enum_cls: type[StrEnum]) -> Enum:
    """
    Build a portable (non-native) enum column type storing member values.

    Args:
        enum_cls: StrEnum class

    Returns:
        SQLAlchemy Enum type
    """
    return Enum(
        enum_cls,
        native_enum=False,
        length=16,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime stored as UTC.

    Backends without native timezone support (SQLite) hand back naive
    values; those are re-tagged as UTC on load.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("Naive datetime cannot be stored, attach a timezone")
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


# Standard timestamp type for all models
TimestampType = UTCDateTime(timezone=True)
