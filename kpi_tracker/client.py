"""
Application client: identity, snapshot subscription and the write path.

TrackerClient is constructed explicitly at startup and handed to the views.
SnapshotFeed holds the latest full snapshot of records; every event replaces
it wholesale, so consumers always recompute from the complete collection.
"""

import logging
from typing import Any, Iterable, Mapping

from .config import DEFAULT_APP_ID
from .records import coerce_record
from .sample_data import get_sample_records
from .store import (
    AuthenticationError,
    Identity,
    RecordStore,
    StoreError,
    StoreNotConfiguredError,
    StoreWriteError,
    SubscriptionError,
    Unsubscribe,
    collection_path,
)

logger = logging.getLogger(__name__)

# Client states
UNINITIALIZED = "uninitialized"
UNCONFIGURED = "unconfigured"
AUTH_FAILED = "auth_failed"
READY = "ready"


class SnapshotFeed:
    """Latest full snapshot of the record collection plus loading/error flags."""

    def __init__(self):
        self.records: tuple[dict, ...] = ()
        self.loading = True
        self.error: Exception | None = None

    def publish(self, records: Iterable[Mapping[str, Any]]) -> None:
        self.records = tuple(dict(r) for r in records)
        self.loading = False
        self.error = None

    def mark_loaded(self) -> None:
        self.loading = False

    def fail(self, exc: Exception) -> None:
        logger.error("Error fetching weekly data: %s", exc)
        self.error = exc
        self.loading = False


class TrackerClient:
    """Owns the store handle, the authenticated identity and the subscription."""

    def __init__(
        self,
        store: RecordStore | None,
        app_id: str = DEFAULT_APP_ID,
        auth_token: str | None = None,
        seed_records: list[dict] | None = None,
    ):
        self.store = store
        self.app_id = app_id
        self.auth_token = auth_token
        self.seed_records = get_sample_records() if seed_records is None else seed_records
        self.identity: Identity | None = None
        self.state = UNINITIALIZED if store is not None else UNCONFIGURED
        self._unsubscribe: Unsubscribe | None = None
        self._seeded = False

    @property
    def is_ready(self) -> bool:
        return self.state == READY

    @property
    def path(self) -> str | None:
        if self.identity is None:
            return None
        return collection_path(self.app_id, self.identity.uid)

    def initialize(self) -> bool:
        """Establish an identity. Returns True when the client is ready.

        Failures are logged and leave the client in AUTH_FAILED; calling
        initialize() again retries.
        """
        if self.store is None:
            return False
        if self.is_ready:
            return True

        try:
            self.identity = self.store.authenticate(self.auth_token)
        except AuthenticationError as exc:
            logger.error("Authentication failed: %s", exc)
            self.state = AUTH_FAILED
            return False

        self.state = READY
        logger.info("Authenticated as %s (anonymous=%s)", self.identity.uid, self.identity.anonymous)
        return True

    def subscribe(self, feed: SnapshotFeed) -> Unsubscribe:
        """Push every snapshot of this identity's collection into `feed`.

        The first empty snapshot seeds the collection with the sample weeks.
        """
        if not self.is_ready:
            raise StoreNotConfiguredError("Client is not initialised")

        path = self.path

        def _on_change(records: list[dict]) -> None:
            if not records and not self._seeded and self.seed_records:
                logger.info("No data found. Pre-populating with initial data...")
                self._seeded = True
                self._seed(path)
                feed.mark_loaded()
                return
            feed.publish(records)

        self.close()
        try:
            self._unsubscribe = self.store.subscribe(path, _on_change, feed.fail)
        except SubscriptionError as exc:
            feed.fail(exc)
        return self.close

    def _seed(self, path: str) -> None:
        try:
            for record in self.seed_records:
                self.store.create(path, record["week_start_date"], record)
        except StoreError as exc:
            logger.error("Error populating data: %s", exc)
            return
        logger.info("Initial data populated.")

    def add_week(self, form: Mapping[str, Any]) -> dict:
        """Coerce a form payload and upsert it keyed by its week start date.

        Returns the record written.

        Raises
        ------
        StoreNotConfiguredError if there is no authenticated identity.
        ValueError if the week start date is missing.
        StoreWriteError if the store rejects the write.
        """
        if not self.is_ready:
            logger.error("Cannot add data: client state is '%s'", self.state)
            raise StoreNotConfiguredError("Authentication error. Cannot add data.")

        try:
            record = coerce_record(form)
        except ValueError as exc:
            logger.warning("Rejected weekly data: %s", exc)
            raise

        try:
            self.store.create(self.path, record["week_start_date"], record)
        except StoreWriteError:
            logger.exception("Error adding document %s", record["week_start_date"])
            raise
        return record

    def close(self) -> None:
        """Tear down the active subscription, if any."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
