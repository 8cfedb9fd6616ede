"""Claim Coordinator — grants a nickname to exactly one identity, atomically.

Invariants:
    - Validation (identity, presence, format) runs before any store access
    - The read-check-write body runs inside ONE store transaction per attempt;
      a rejected outcome rolls the transaction back (no partial state)
    - Every attempt re-reads Reservation and Profile; nothing is cached
    - Only TransactionConflictError is retried, at most max_attempts times
    - Anything else collapses to INTERNAL with a generic message; the cause is logged

Design Decisions:
    - Store injected via constructor, never a module singleton: tests run the
      same protocol against an in-memory fake
    - Stateless and reentrant: no locks, all mutual exclusion is the store's job
    - Exponential backoff with ±25% jitter between conflict retries: racing
      claimers on one popular name spread out instead of colliding again
"""

import asyncio
import logging
import random

from app.core.claim_decision import check_caller_unclaimed, check_nickname_free
from app.core.claim_outcome import (
    ClaimGranted, ClaimOutcome, ClaimRejected, internal_failure,
)
from app.core.domain_types import NormalizedNickname, Uid
from app.core.enforce_nickname import normalize_nickname, validate_claim_request
from app.core.errors import TransactionConflictError
from app.core.repository_protocols import (
    ClaimBody, ClaimTransaction, NicknameStore,
)

logger = logging.getLogger(__name__)


class ClaimCoordinator:
    """Executes the atomic claim protocol against a transactional store."""

    def __init__(
        self,
        store: NicknameStore,
        max_attempts: int = 5,
        base_delay_ms: int = 20,
        max_delay_ms: int = 500,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.store = store
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def claim(
        self, caller_uid: str | None, requested: object,
    ) -> ClaimOutcome:
        """Claim `requested` for `caller_uid`. Never raises for store failures."""
        error = validate_claim_request(caller_uid, requested)
        if error:
            logger.info(
                f"Claim rejected before store access: {error.message}",
                extra={"uid": caller_uid, "error_code": error.kind.value},
            )
            return error

        uid = Uid(caller_uid)  # type: ignore[arg-type]
        nickname: str = requested  # type: ignore[assignment]
        body = _claim_body(uid, nickname, normalize_nickname(nickname))

        try:
            outcome = await self._run_with_retries(body, uid)
        except Exception as e:
            logger.error(
                f"Error claiming nickname: {e}",
                exc_info=True,
                extra={"uid": uid, "nickname": nickname},
            )
            return internal_failure()

        self._log_outcome(outcome, uid, nickname)
        return outcome

    async def _run_with_retries(
        self, body: ClaimBody, uid: Uid,
    ) -> ClaimOutcome:
        """Run body in a fresh transaction until it commits or is rejected."""
        for attempt in range(self.max_attempts):
            try:
                return await self.store.transact(body)
            except TransactionConflictError as e:
                if attempt + 1 >= self.max_attempts:
                    logger.error(
                        f"Claim transaction conflict after {self.max_attempts} attempts: {e}",
                        extra={"uid": uid, "attempt": attempt + 1},
                    )
                    return internal_failure()
                delay = self._backoff(attempt)
                logger.warning(
                    f"Claim transaction conflict, retry after {delay}ms",
                    extra={"uid": uid, "attempt": attempt + 1},
                )
                await asyncio.sleep(delay / 1000)
        return internal_failure()  # unreachable: max_attempts >= 1

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _log_outcome(
        self, outcome: ClaimOutcome, uid: Uid, nickname: str,
    ) -> None:
        if isinstance(outcome, ClaimRejected):
            logger.info(
                f"Claim rejected: {outcome.message}",
                extra={
                    "uid": uid, "nickname": nickname,
                    "error_code": outcome.kind.value,
                },
            )
            return
        logger.info(
            "Nickname claimed", extra={"uid": uid, "nickname": nickname},
        )


def _claim_body(
    uid: Uid, nickname: str, nickname_lower: NormalizedNickname,
) -> ClaimBody:
    """Build the read-check-write body for one claim."""

    async def body(tx: ClaimTransaction) -> ClaimOutcome:
        reservation = await tx.get_reservation(nickname_lower)
        error = check_nickname_free(reservation)
        if error:
            return error

        profile = await tx.get_profile(uid)
        error = check_caller_unclaimed(profile)
        if error:
            return error

        await tx.create_reservation(nickname_lower, uid)
        if profile is None:
            await tx.create_profile(uid, nickname, nickname_lower)
        else:
            await tx.set_profile_nickname(uid, nickname, nickname_lower)
        return ClaimGranted(nickname=nickname)

    return body
