"""In-Memory Nickname Store — optimistic fake with the same contract as SqlNicknameStore.

Invariants:
    - Reads record (table, key) → version; commit validates every read version
      and raises TransactionConflictError if any changed (serializable)
    - Writes are buffered and applied in one synchronous step: no await between
      validation and apply, so commits are atomic on the event loop
    - Rejected outcomes discard buffered writes
    - Every read yields to the event loop so concurrent claims interleave

Design Decisions:
    - Plain dicts for records: tests inspect store state directly
    - Failure injection knobs (fail_with, forced_conflicts) instead of mocks
"""

import asyncio
from datetime import datetime, timedelta, timezone

from app.core.errors import TransactionConflictError
from app.core.repository_protocols import ProfileSnapshot, ReservationSnapshot

RESERVATIONS = "reservations"
PROFILES = "profiles"

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


class InMemoryNicknameStore:
    """NicknameStore backed by dicts with optimistic concurrency control."""

    def __init__(self):
        self.tables: dict[str, dict[str, dict]] = {RESERVATIONS: {}, PROFILES: {}}
        self.versions: dict[tuple[str, str], int] = {}
        self.transactions = 0
        self.commits = 0
        self.conflicts = 0
        self.fail_with: Exception | None = None
        self.forced_conflicts = 0
        self._tick = 0

    @property
    def reservations(self) -> dict[str, dict]:
        return self.tables[RESERVATIONS]

    @property
    def profiles(self) -> dict[str, dict]:
        return self.tables[PROFILES]

    def server_timestamp(self) -> datetime:
        """Monotonic stand-in for the database clock."""
        self._tick += 1
        return _EPOCH + timedelta(seconds=self._tick)

    def seed_profile(self, uid: str, **fields) -> None:
        self.profiles[uid] = {"uid": uid, **fields}
        self._bump(PROFILES, uid)

    async def transact(self, body):
        self.transactions += 1
        if self.fail_with is not None:
            raise self.fail_with
        tx = _FakeTransaction(self)
        outcome = await body(tx)
        if not outcome.granted:
            return outcome
        if self.forced_conflicts > 0:
            self.forced_conflicts -= 1
            self.conflicts += 1
            raise TransactionConflictError("forced conflict")
        tx.commit()
        return outcome

    def _bump(self, table: str, key: str) -> None:
        self.versions[(table, key)] = self.versions.get((table, key), 0) + 1


class _FakeTransaction:
    """ClaimTransaction over InMemoryNicknameStore."""

    def __init__(self, store: InMemoryNicknameStore):
        self.store = store
        self.read_set: dict[tuple[str, str], int] = {}
        self.writes: list[tuple[str, str, dict, bool]] = []

    async def _read(self, table: str, key: str) -> dict | None:
        self.read_set[(table, key)] = self.store.versions.get((table, key), 0)
        record = self.store.tables[table].get(key)
        snapshot = dict(record) if record is not None else None
        await asyncio.sleep(0)
        return snapshot

    async def get_reservation(self, nickname_lower):
        record = await self._read(RESERVATIONS, nickname_lower)
        if record is None:
            return None
        return ReservationSnapshot(
            nickname_lower=record["nickname_lower"],
            uid=record["uid"],
            claimed_at=record.get("claimed_at"),
        )

    async def get_profile(self, uid):
        record = await self._read(PROFILES, uid)
        if record is None:
            return None
        return ProfileSnapshot(
            uid=record["uid"],
            nickname=record.get("nickname"),
            nickname_lower=record.get("nickname_lower"),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )

    async def create_reservation(self, nickname_lower, uid):
        self.writes.append((
            RESERVATIONS, nickname_lower,
            {"nickname_lower": nickname_lower, "uid": uid, "claimed_at": None},
            False,
        ))

    async def create_profile(self, uid, nickname, nickname_lower):
        self.writes.append((
            PROFILES, uid,
            {
                "uid": uid, "nickname": nickname,
                "nickname_lower": nickname_lower,
                "created_at": None, "updated_at": None,
            },
            False,
        ))

    async def set_profile_nickname(self, uid, nickname, nickname_lower):
        self.writes.append((
            PROFILES, uid,
            {"nickname": nickname, "nickname_lower": nickname_lower, "updated_at": None},
            True,
        ))

    def commit(self) -> None:
        store = self.store
        for key, version in self.read_set.items():
            if store.versions.get(key, 0) != version:
                store.conflicts += 1
                raise TransactionConflictError(f"stale read on {key}")
        now = store.server_timestamp()
        for table, key, fields, merge in self.writes:
            stamped = {k: (now if v is None and k.endswith("_at") else v)
                       for k, v in fields.items()}
            if merge:
                store.tables[table][key].update(stamped)
            else:
                store.tables[table][key] = stamped
            store._bump(table, key)
        store.commits += 1


def assert_consistent(store: InMemoryNicknameStore) -> None:
    """Every reservation has a matching profile, and vice versa."""
    for key, reservation in store.reservations.items():
        profile = store.profiles.get(reservation["uid"])
        assert profile is not None, f"reservation {key} has no profile"
        assert profile["nickname_lower"] == key
        assert profile["nickname"].lower() == key
    for uid, profile in store.profiles.items():
        if profile.get("nickname"):
            reservation = store.reservations.get(profile["nickname_lower"])
            assert reservation is not None, f"profile {uid} has no reservation"
            assert reservation["uid"] == uid
