"""
Structural normalization of Datastore property values.

Entities fetched from Datastore carry backend types: embedded entities,
keys pointing at other entities and arrays mixing both. normalize() turns
such a value into a tree built only from dict, list and scalars, which the
writers can encode without knowing anything about Datastore.
"""

from collections.abc import Mapping

from google.cloud.datastore import Key


def key_identifier(key):
    """
    Resolve a key to its name, falling back to the decimal numeric id.
    An incomplete key has neither and resolves to an empty string.
    """
    if key.name:
        return key.name
    if key.id is None:
        return ''
    return str(key.id)


def normalize_entity(entity):
    """
    Normalize every property of an entity, dropping the ones set to None.
    Property order is preserved.
    """
    record = {}
    for name, value in entity.items():
        if value is None:
            continue
        record[name] = normalize(value)
    return record


def normalize(raw):
    """
    Convert a property value into plain dicts, lists and scalars.

    - Key -> its name or id as a string
    - embedded entity / mapping -> dict, None properties omitted
    - list / tuple -> list, None elements skipped
    - anything else is returned unchanged
    """
    if isinstance(raw, Key):
        return key_identifier(raw)
    if isinstance(raw, Mapping):
        return normalize_entity(raw)
    if isinstance(raw, (list, tuple)):
        return [normalize(item) for item in raw if item is not None]
    return raw
