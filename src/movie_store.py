"""
Document storage for users and movies.

The app only needs four operations from its store: insert with a generated
key, read by key, partial update by key, and a filtered, ordered query.
"""

import copy
import logging
import uuid
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


def generate_key():
    return uuid.uuid4().hex


class DocumentStore(ABC):
    """Interface every storage backend implements."""

    @abstractmethod
    def insert(self, collection, document):
        """Store a new document and return its generated key."""

    @abstractmethod
    def get(self, collection, key):
        """Return the document for key, or None."""

    @abstractmethod
    def patch(self, collection, key, updates):
        """Merge updates into an existing document. Returns the result, or None if missing."""

    @abstractmethod
    def query(self, collection, field=None, value=None, order_by=None, descending=False):
        """Return documents where field == value (all when field is None), optionally ordered."""


def sort_documents(documents, order_by=None, descending=False):
    """Stable sort by a field; documents missing the field sort last."""
    if not order_by:
        return list(documents)
    present = [d for d in documents if d.get(order_by) not in (None, "")]
    missing = [d for d in documents if d.get(order_by) in (None, "")]
    return sorted(present, key=lambda d: d[order_by], reverse=descending) + missing


class InMemoryStore(DocumentStore):
    """Process-local store used for tests and when no spreadsheet is configured."""

    def __init__(self):
        self._collections = {}

    def _collection(self, name):
        return self._collections.setdefault(name, {})

    def insert(self, collection, document):
        key = generate_key()
        stored = dict(document, id=key)
        self._collection(collection)[key] = stored
        logger.debug("Inserted %s/%s", collection, key)
        return key

    def get(self, collection, key):
        document = self._collection(collection).get(key)
        return copy.deepcopy(document) if document is not None else None

    def patch(self, collection, key, updates):
        documents = self._collection(collection)
        if key not in documents:
            return None
        updates = {k: v for k, v in updates.items() if k != "id"}
        documents[key].update(updates)
        return copy.deepcopy(documents[key])

    def query(self, collection, field=None, value=None, order_by=None, descending=False):
        documents = self._collection(collection).values()
        if field is not None:
            documents = [d for d in documents if d.get(field) == value]
        return [copy.deepcopy(d) for d in sort_documents(documents, order_by, descending)]
