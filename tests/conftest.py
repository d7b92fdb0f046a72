import os
import sys

from google.cloud import datastore

# Ensure repo root is on sys.path for imports like 'import main'
_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

PROJECT = "test-project"


def make_key(kind, id_or_name=None, namespace=None, parent=None):
    path = (kind,) if id_or_name is None else (kind, id_or_name)
    return datastore.Key(*path, project=PROJECT, namespace=namespace, parent=parent)


def make_entity(kind="users", id_or_name=None, **props):
    key = make_key(kind, id_or_name) if id_or_name is not None else None
    entity = datastore.Entity(key=key)
    entity.update(props)
    return entity


class FakeSource:
    """
    In-memory stand-in for DatastoreSource.
    """

    def __init__(self, records=None, namespaces=None, kinds=None, keys=None, fail_at=None, error=None):
        self.records = records or []
        self._namespaces = namespaces or []
        self._kinds = kinds or {}
        self._keys = keys or {}
        self.fail_at = fail_at
        self.error = error
        self.fetches = []
        self.deleted = []

    def fetch_page(self, kind, namespace, offset, limit):
        self.fetches.append((kind, namespace, offset, limit))
        if self.fail_at is not None and len(self.fetches) > self.fail_at:
            raise self.error
        return self.records[offset : offset + limit]

    def namespaces(self):
        if self.error is not None and self.fail_at is None:
            raise self.error
        return list(self._namespaces)

    def kinds(self, namespace):
        return list(self._kinds.get(namespace, []))

    def keys(self, kind, namespace):
        return list(self._keys.get((namespace, kind), []))

    def delete_keys(self, keys):
        self.deleted.append(list(keys))
