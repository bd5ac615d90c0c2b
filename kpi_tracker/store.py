"""
Remote record store: authentication, snapshot subscription and keyed
upsert over a per-identity document collection.

RecordStore is the interface the client consumes. FirestoreRecordStore
talks to Cloud Firestore through firebase-admin; InMemoryRecordStore keeps
documents in process for demos and tests.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

import firebase_admin
from firebase_admin import auth, credentials, firestore

from .config import BACKEND_MEMORY, COLLECTION_TEMPLATE, BackendConfig
from .records import from_document, to_document

logger = logging.getLogger(__name__)

OnChange = Callable[[list[dict]], None]
OnError = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class StoreError(Exception):
    """Base class for record store failures."""


class StoreNotConfiguredError(StoreError):
    """No backend credentials or identity are available."""


class AuthenticationError(StoreError):
    """Establishing an identity with the backend failed."""


class SubscriptionError(StoreError):
    """The snapshot subscription failed or delivered an unreadable snapshot."""


class StoreWriteError(StoreError):
    """A record could not be written."""


@dataclass(frozen=True)
class Identity:
    uid: str
    anonymous: bool = True


def collection_path(app_id: str, uid: str) -> str:
    """Collection holding one identity's weekly records."""
    return COLLECTION_TEMPLATE.format(app_id=app_id, user_id=uid)


class RecordStore:
    """
    Interface for the remote record store.

    subscribe() pushes the full current record set on every change, never a
    delta. create() is an upsert keyed by the week start date.
    authenticate() without a token returns the same anonymous identity for
    the lifetime of the store.
    """

    def authenticate(self, token: str | None = None) -> Identity:
        raise NotImplementedError

    def subscribe(self, path: str, on_change: OnChange, on_error: OnError) -> Unsubscribe:
        raise NotImplementedError

    def create(self, path: str, key: str, record: Mapping[str, Any]) -> None:
        raise NotImplementedError


class InMemoryRecordStore(RecordStore):
    """Process-local store. Notifies subscribers synchronously."""

    def __init__(self, user_id: str | None = None):
        self._user_id = user_id
        self._anonymous: Identity | None = None
        self._collections: dict[str, dict[str, dict]] = {}
        self._subscribers: dict[str, list[tuple[OnChange, OnError]]] = {}

    def authenticate(self, token: str | None = None) -> Identity:
        if token:
            return Identity(uid=token, anonymous=False)
        if self._user_id:
            return Identity(uid=self._user_id, anonymous=False)
        if self._anonymous is None:
            self._anonymous = Identity(uid=uuid.uuid4().hex, anonymous=True)
        return self._anonymous

    def snapshot(self, path: str) -> list[dict]:
        docs = self._collections.get(path, {})
        return [from_document(key, data) for key, data in docs.items()]

    def subscribe(self, path: str, on_change: OnChange, on_error: OnError) -> Unsubscribe:
        listeners = self._subscribers.setdefault(path, [])
        entry = (on_change, on_error)
        listeners.append(entry)

        def _unsubscribe() -> None:
            if entry in listeners:
                listeners.remove(entry)

        self._notify(path, [entry])
        return _unsubscribe

    def _notify(self, path: str, entries: list[tuple[OnChange, OnError]]) -> None:
        for on_change, on_error in entries:
            try:
                on_change(self.snapshot(path))
            except Exception as exc:
                logger.exception("Snapshot listener failed for %s", path)
                on_error(SubscriptionError(str(exc)))

    def create(self, path: str, key: str, record: Mapping[str, Any]) -> None:
        doc = to_document(record)
        doc["createdAt"] = datetime.now(timezone.utc)
        self._collections.setdefault(path, {})[key] = doc
        logger.info("Document written with ID: %s", key)

        self._notify(path, list(self._subscribers.get(path, [])))


class FirestoreRecordStore(RecordStore):
    """Cloud Firestore store via firebase-admin."""

    def __init__(self, db, app=None, user_id: str | None = None):
        self._db = db
        self._app = app
        self._user_id = user_id
        self._anonymous: Identity | None = None

    @classmethod
    def from_config(cls, config: BackendConfig) -> "FirestoreRecordStore":
        """Initialise a named firebase app from BackendConfig."""
        if config.credentials_path:
            cred = credentials.Certificate(config.credentials_path)
        else:
            cred = credentials.ApplicationDefault()

        options = {"projectId": config.project_id} if config.project_id else None
        try:
            app = firebase_admin.get_app(config.app_id)
        except ValueError:
            app = firebase_admin.initialize_app(cred, options, name=config.app_id)

        return cls(firestore.client(app), app=app, user_id=config.user_id)

    def authenticate(self, token: str | None = None) -> Identity:
        try:
            if token:
                claims = auth.verify_id_token(token, app=self._app)
                return Identity(uid=claims["uid"], anonymous=False)
            if self._user_id:
                return Identity(uid=self._user_id, anonymous=False)
            if self._anonymous is None:
                user = auth.create_user(app=self._app)
                self._anonymous = Identity(uid=user.uid, anonymous=True)
            return self._anonymous
        except Exception as exc:
            raise AuthenticationError(str(exc)) from exc

    def subscribe(self, path: str, on_change: OnChange, on_error: OnError) -> Unsubscribe:
        def _on_snapshot(docs, changes, read_time) -> None:
            try:
                records = [from_document(doc.id, doc.to_dict()) for doc in docs]
                on_change(records)
            except Exception as exc:
                logger.exception("Failed to process snapshot for %s", path)
                on_error(SubscriptionError(str(exc)))

        try:
            watch = self._db.collection(path).on_snapshot(_on_snapshot)
        except Exception as exc:
            raise SubscriptionError(str(exc)) from exc
        return watch.unsubscribe

    def create(self, path: str, key: str, record: Mapping[str, Any]) -> None:
        doc = to_document(record)
        doc["createdAt"] = firestore.SERVER_TIMESTAMP
        try:
            self._db.collection(path).document(key).set(doc)
        except Exception as exc:
            raise StoreWriteError(str(exc)) from exc
        logger.info("Document written with ID: %s", key)


def build_store(config: BackendConfig) -> RecordStore | None:
    """Build the configured store, or None when no backend is available."""
    if not config.is_configured:
        logger.error("Firebase config is not available — dashboard will stay empty")
        return None

    if config.backend == BACKEND_MEMORY:
        logger.info("Using in-memory record store")
        return InMemoryRecordStore(user_id=config.user_id)

    try:
        return FirestoreRecordStore.from_config(config)
    except Exception:
        logger.exception("Failed to initialise Firestore")
        return None
