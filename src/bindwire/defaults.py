import datetime
import decimal
import enum
import pathlib
import uuid
from typing import Any

DEFAULT_SCALAR_TYPES: frozenset[type[Any]] = frozenset(
    {
        int,
        str,
        float,
        bool,
        bytes,
        complex,
        list,
        dict,
        set,
        frozenset,
        tuple,
        object,
    },
)
"""Parameter annotations the container never tries to resolve."""

DEFAULT_SCALAR_BASE_TYPES: tuple[type[Any], ...] = (
    pathlib.PurePath,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    decimal.Decimal,
    enum.Enum,
)
"""Value types whose subclasses are treated like scalars as well."""

DEFAULT_DETECT_CYCLES = True
