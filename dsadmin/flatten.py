"""
Flatten normalized records into (path, value) pairs for row formats.
"""

import base64
import datetime
import json

from google.cloud.datastore.helpers import GeoPoint

PATH_SEPARATOR = ':'


def flatten(record):
    """
    Walk a normalized record depth-first, descending only into dicts.

    Nested fields get a path joined with ':' ancestors first, so
    {"a": {"b": 1}} yields [("a:b", 1)]. Lists are leaves.
    """
    fields = []
    for name, value in record.items():
        if isinstance(value, dict):
            for path, leaf in flatten(value):
                fields.append((f"{name}{PATH_SEPARATOR}{path}", leaf))
        else:
            fields.append((name, value))
    return fields


def field_paths(fields):
    return [path for path, _ in fields]


def header_of(record):
    return field_paths(flatten(record))


def json_default(value):
    """
    json.dumps fallback for the scalar types Datastore returns.
    """
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode('ascii')
    if isinstance(value, GeoPoint):
        return {"latitude": value.latitude, "longitude": value.longitude}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def render_scalar(value):
    """
    Render one flattened value as CSV cell text.
    """
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode('ascii')
    if isinstance(value, GeoPoint):
        return f"{value.latitude},{value.longitude}"
    if isinstance(value, list):
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=json_default)
    return str(value)
