"""Session manager - single-flight acquisition and caching of an auth session.

The network call is not owned here: callers pass an async ``exchange``
function that trades Credentials for a token. The manager caches the
resulting Session, re-acquires it on expiry or invalidation, and makes sure
concurrent callers share one in-flight exchange per credential identity.
"""

import asyncio
import functools
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Optional

import structlog
from pydantic import ValidationError

from contractguard.config import get_settings
from contractguard.exceptions import AuthenticationError, SessionExpired
from contractguard.models.session import Credentials, ExchangeResult, Session, SessionState, utcnow
from contractguard.validators.paths import get_path

logger = structlog.get_logger()

ExchangeFn = Callable[[Credentials], Awaitable[Any]]
Clock = Callable[[], datetime]


class SessionManager:
    """Acquires, caches, and invalidates one authentication session.

    State machine:
        UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED
        AUTHENTICATED -> EXPIRED | INVALIDATED -> AUTHENTICATING -> ...

    Failed or timed-out exchanges keep the cached session; once no exchange is
    running the state is recomputed from what is cached. Failures are surfaced,
    never retried here.
    """

    def __init__(
        self,
        exchange: ExchangeFn,
        credentials: Optional[Credentials] = None,
        *,
        timeout_seconds: Optional[float] = None,
        ttl_seconds: Optional[float] = None,
        expiry_skew_seconds: Optional[float] = None,
        clock: Optional[Clock] = None,
    ):
        settings = get_settings()
        self._exchange = exchange
        self._credentials = credentials
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.AUTH_TIMEOUT_SECONDS
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.SESSION_TTL_SECONDS
        self.expiry_skew_seconds = (
            expiry_skew_seconds if expiry_skew_seconds is not None else settings.EXPIRY_SKEW_SECONDS
        )
        self.header_name = settings.AUTH_HEADER_NAME
        self.auth_scheme = settings.AUTH_SCHEME
        self._clock = clock or utcnow

        self._session: Optional[Session] = None
        self._state = SessionState.UNAUTHENTICATED
        # State to fall back to when no exchange is running and nothing is cached
        self._idle_state = SessionState.UNAUTHENTICATED
        # Bumped by invalidate(); exchanges started under an older value are not cached
        self._generation = 0
        self._inflight: dict[str, asyncio.Future] = {}

    # ── Introspection ──

    @property
    def state(self) -> SessionState:
        if self._state == SessionState.AUTHENTICATED and self._is_stale(self._session):
            return SessionState.EXPIRED
        return self._state

    @property
    def session(self) -> Optional[Session]:
        """The cached session, expired or not (None before the first acquisition)."""
        return self._session

    @property
    def in_flight(self) -> bool:
        return bool(self._inflight)

    # ── Public API ──

    async def acquire(self, credentials: Optional[Credentials] = None) -> Session:
        """Run the authentication exchange and cache the resulting Session.

        Concurrent calls for the same identity join the in-flight exchange and
        receive the same Session (or the same error).

        Args:
            credentials: Credentials to authenticate with; defaults to the last-known pair

        Raises:
            AuthenticationError: exchange failed, timed out, or returned no usable token
        """
        credentials = credentials or self._credentials
        if credentials is None:
            raise AuthenticationError("no credentials supplied")
        self._credentials = credentials

        key = credentials.identity
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._authenticate(credentials))
            self._inflight[key] = task
            task.add_done_callback(functools.partial(self._forget, key))
        else:
            logger.debug("session_acquire_joined", identity=key)

        # One waiter giving up must not cancel the exchange for the others
        return await asyncio.shield(task)

    async def current(self) -> Session:
        """Return the cached Session, re-acquiring it when missing or expired."""
        try:
            return self._require_fresh()
        except SessionExpired as e:
            if self._session is not None:
                logger.info("session_expired", identity=self._session.identity, reason=str(e))
                self._state = SessionState.EXPIRED

        if self._credentials is None:
            raise AuthenticationError("no session acquired and no credentials to acquire one")
        return await self.acquire(self._credentials)

    def invalidate(self) -> None:
        """Drop the cached Session so the next ``current()`` re-acquires."""
        identity = self._session.identity if self._session else None
        self._session = None
        self._generation += 1
        self._idle_state = SessionState.INVALIDATED
        self._state = SessionState.AUTHENTICATING if self._inflight else SessionState.INVALIDATED
        logger.info("session_invalidated", identity=identity, exchanges_in_flight=len(self._inflight))

    def cancel(self) -> int:
        """Cancel every in-flight exchange; all of its waiters see CancelledError.

        Returns:
            Number of exchanges cancelled
        """
        cancelled = 0
        for task in list(self._inflight.values()):
            if task.cancel():
                cancelled += 1
        if cancelled:
            logger.warning("session_exchange_cancelled", count=cancelled)
        return cancelled

    async def auth_headers(self) -> dict[str, str]:
        """Request headers carrying the current session token."""
        session = await self.current()
        value = f"{self.auth_scheme} {session.token}" if self.auth_scheme else session.token
        return {self.header_name: value}

    # ── Internals ──

    def _is_stale(self, session: Optional[Session]) -> bool:
        return session is not None and session.is_expired(self._clock(), self.expiry_skew_seconds)

    def _require_fresh(self) -> Session:
        session = self._session
        if session is None:
            raise SessionExpired("no session acquired")
        if self._is_stale(session):
            raise SessionExpired(f"session expired at {session.expires_at.isoformat()}")
        return session

    def _forget(self, key: str, task: asyncio.Future) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def _settle_state(self) -> None:
        """Derive the state from the running exchanges and the cached session."""
        current = asyncio.current_task()
        if any(task is not current and not task.done() for task in self._inflight.values()):
            self._state = SessionState.AUTHENTICATING
        elif self._session is not None:
            self._state = SessionState.AUTHENTICATED
        else:
            self._state = self._idle_state

    async def _authenticate(self, credentials: Credentials) -> Session:
        identity = credentials.identity
        generation = self._generation
        if self._state != SessionState.AUTHENTICATING:
            self._idle_state = self._state
        self._state = SessionState.AUTHENTICATING
        logger.info("session_authenticating", identity=identity, timeout_seconds=self.timeout_seconds)

        try:
            raw = await asyncio.wait_for(self._exchange(credentials), timeout=self.timeout_seconds)
            session = self._build_session(identity, raw)
        except asyncio.TimeoutError as e:
            self._settle_state()
            logger.warning("session_auth_timeout", identity=identity, timeout_seconds=self.timeout_seconds)
            raise AuthenticationError(f"exchange timed out after {self.timeout_seconds}s", identity) from e
        except asyncio.CancelledError:
            self._settle_state()
            logger.warning("session_auth_cancelled", identity=identity)
            raise
        except AuthenticationError as e:
            self._settle_state()
            logger.error("session_auth_failed", identity=identity, error=e.reason)
            raise
        except Exception as e:
            self._settle_state()
            logger.error("session_auth_failed", identity=identity, error=str(e), error_type=type(e).__name__)
            raise AuthenticationError(f"exchange failed: {e}", identity) from e

        if generation != self._generation:
            # Invalidated mid-flight: waiters still get the session, the cache stays empty
            self._settle_state()
            logger.info("session_discarded", identity=identity, reason="invalidated during exchange")
            return session

        self._session = session
        self._settle_state()
        logger.info(
            "session_acquired",
            identity=identity,
            expires_at=session.expires_at.isoformat() if session.expires_at else None,
        )
        return session

    def _build_session(self, identity: str, raw: Any) -> Session:
        """Turn whatever the exchange returned into a Session."""
        if isinstance(raw, str):
            raw = {"token": raw}
        if isinstance(raw, ExchangeResult):
            result = raw
        elif isinstance(raw, dict):
            try:
                result = ExchangeResult.model_validate(raw)
            except ValidationError as e:
                raise AuthenticationError(f"malformed exchange result: {e.error_count()} error(s)", identity) from e
        else:
            raise AuthenticationError(f"exchange returned {type(raw).__name__}, expected a token", identity)

        if not result.usable:
            raise AuthenticationError("exchange did not yield a usable token", identity)

        acquired_at = self._clock()
        expires_at = result.expires_at
        if expires_at is None and result.expires_in is not None:
            expires_at = acquired_at + timedelta(seconds=result.expires_in)
        if expires_at is None and self.ttl_seconds is not None:
            expires_at = acquired_at + timedelta(seconds=self.ttl_seconds)

        return Session(identity=identity, token=result.token, acquired_at=acquired_at, expires_at=expires_at)


def token_exchange(
    fetch: Callable[[Credentials], Awaitable[Any]],
    token_path: str = "data.authUser.token",
    expires_path: Optional[str] = None,
) -> ExchangeFn:
    """Adapt a raw-response fetcher into an exchange function.

    ``fetch`` performs the login request and returns the decoded body; the
    token (and optional expiry) are read from dotted paths in that body.

    Usage:
        manager = SessionManager(token_exchange(post_auth_user), credentials)
    """

    async def exchange(credentials: Credentials) -> ExchangeResult:
        body = await fetch(credentials)
        token = get_path(body, token_path, default=None)
        expires_at = get_path(body, expires_path, default=None) if expires_path else None
        return ExchangeResult(
            token=token if isinstance(token, str) else None,
            expires_at=expires_at,
        )

    return exchange
