"""
Thin wrapper around the Datastore client.

The export and delete loops only talk to this class, which keeps them
testable without a live project.
"""

from google.cloud import datastore

NAMESPACE_KIND = '__namespace__'
KIND_KIND = '__kind__'


def is_reserved_kind(name):
    return name.startswith('__') and name.endswith('__')


class DatastoreSource:
    def __init__(self, client):
        self.client = client

    @classmethod
    def for_project(cls, project_id):
        # Make sure your GOOGLE_APPLICATION_CREDENTIALS point at a key with access to the project.
        return cls(datastore.Client(project=project_id))

    def fetch_page(self, kind, namespace, offset, limit):
        """
        Return one page of entities of `kind`, in query order.
        """
        query = self.client.query(kind=kind, namespace=namespace)
        return list(query.fetch(offset=offset, limit=limit))

    def namespaces(self):
        """
        List namespace names. The default namespace is reported as ''.
        """
        query = self.client.query(kind=NAMESPACE_KIND)
        query.keys_only()
        return [entity.key.name or '' for entity in query.fetch()]

    def kinds(self, namespace):
        """
        List user kinds in a namespace, leaving out reserved __*__ kinds.
        """
        query = self.client.query(kind=KIND_KIND, namespace=namespace)
        query.keys_only()
        names = [entity.key.name for entity in query.fetch()]
        return [name for name in names if not is_reserved_kind(name)]

    def keys(self, kind, namespace):
        query = self.client.query(kind=kind, namespace=namespace)
        query.keys_only()  # we only need the keys
        return [entity.key for entity in query.fetch()]

    def delete_keys(self, keys):
        self.client.delete_multi(keys)
