"""
Delete every entity in a set of namespaces and kinds.
"""

import logging

from google.api_core.exceptions import GoogleAPIError

from dsadmin import config
from dsadmin.errors import DeleteError

logger = logging.getLogger(__name__)

ALL_CHOICE = 'all'


def chunked(items, size):
    for i in range(0, len(items), size):
        yield items[i : i + size]


def choose_namespaces(namespaces, ask=input):
    """
    Let the operator pick one discovered namespace or all of them.
    An empty answer means all.
    """
    listing = "\n".join(f"  {ns or '(default)'}" for ns in namespaces)
    choices = list(namespaces) + [ALL_CHOICE]
    question = (
        f"Entities from the following namespaces will be deleted:\n{listing}\n"
        f"Choose one of {', '.join(repr(c) for c in choices)} [{ALL_CHOICE}]: "
    )
    while True:
        answer = ask(question).strip()
        if answer in ('', ALL_CHOICE):
            return list(namespaces)
        if answer == '(default)':
            answer = ''
        if answer in namespaces:
            return [answer]
        print(f"Unknown namespace: {answer}")


def resolve_namespaces(source, namespaces=None, assume_yes=False, ask=input):
    if namespaces:
        return namespaces
    discovered = source.namespaces()
    if not discovered:
        return ['']
    if assume_yes:
        return discovered
    return choose_namespaces(discovered, ask=ask)


def delete_all(source, namespaces=None, kinds=None, batch_size=None,
               assume_yes=False, ask=input):
    """
    Delete all entities of `kinds` in `namespaces`, discovering either list
    from Datastore metadata when it is not given.

    Keys are removed in batches of `batch_size` (500 is the most
    delete_multi accepts). Returns the number of deleted keys.
    """
    batch_size = batch_size or config.DELETE_BATCH_SIZE
    total = 0

    try:
        for ns in resolve_namespaces(source, namespaces, assume_yes, ask):
            ns_kinds = kinds or source.kinds(ns)
            for kind in ns_kinds:
                print(f"Deleting {ns}/{kind} ... ", end="", flush=True)
                keys = source.keys(kind, ns)
                print(f"Keys: {len(keys)}")

                for batch in chunked(keys, batch_size):
                    source.delete_keys(batch)
                    logger.debug("Deleted %d entities from %s/%s", len(batch), ns, kind)
                total += len(keys)
    except GoogleAPIError as e:
        raise DeleteError(f"Delete aborted after {total} entities: {e}") from e

    return total
