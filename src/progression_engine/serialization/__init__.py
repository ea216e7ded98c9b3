"""Serialization module: encode tracker state for key-value persistence."""

from progression_engine.serialization.json_codec import (
    failure_tracker_from_json,
    failure_tracker_to_json,
    format_timestamp,
    parse_timestamp,
    session_from_dict,
    session_to_dict,
    sessions_from_json,
    sessions_to_json,
    weights_from_json,
    weights_to_json,
)

__all__ = [
    "failure_tracker_from_json",
    "failure_tracker_to_json",
    "format_timestamp",
    "parse_timestamp",
    "session_from_dict",
    "session_to_dict",
    "sessions_from_json",
    "sessions_to_json",
    "weights_from_json",
    "weights_to_json",
]
