from .timecodes import parse_timecode, format_timecode
from .steps import (
    FixtureStep,
    build_steps,
    validate_order,
    FETCH,
    TRANSCODE,
    SLICE,
)

__all__ = [
    "parse_timecode",
    "format_timecode",
    "FixtureStep",
    "build_steps",
    "validate_order",
    "FETCH",
    "TRANSCODE",
    "SLICE",
]
