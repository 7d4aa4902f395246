"""
Navigation gate runtime.

Feeds the pure decision in gate.rules from asynchronous signals: auth state
notifications, profile fetches and route changes. All state lives on a
GateContext owned by the gate instance. NavigationGate is the API a client
embeds; GET /navigation/resolve answers the same question statelessly.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Set

from recovery_companion.gate.rules import (
    HOME_SEGMENT,
    GateInputs,
    RouteIntent,
    Session,
    build_inputs,
    decide_inputs,
    normalize_segment,
)

logger = logging.getLogger(__name__)

AuthCallback = Callable[[Optional[Session]], Awaitable[None]]


class ProfileFetcher(Protocol):
    async def fetch_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        ...


class Router(Protocol):
    def replace(self, destination: str) -> None:
        ...


class AuthStateSource(Protocol):
    def on_auth_state_changed(self, callback: AuthCallback) -> Callable[[], None]:
        """Register a callback; returns an unsubscribe function."""
        ...


@dataclass
class GateContext:
    session: Optional[Session] = None
    profile: Optional[Dict[str, Any]] = None
    segment: str = HOME_SEGMENT
    ready: bool = False
    last_inputs: Optional[GateInputs] = None
    generation: int = 0  # bumped on every auth state change


class NavigationGate:
    """Observes session, profile and route and issues at most one redirect per change."""

    def __init__(self, profiles: ProfileFetcher, router: Router, segment: str = HOME_SEGMENT):
        self.context = GateContext(segment=normalize_segment(segment))
        self._profiles = profiles
        self._router = router
        self._refreshes: Set[asyncio.Task] = set()

    @property
    def loading(self) -> bool:
        """True until the first auth state notification arrives."""
        return not self.context.ready

    def attach(self, auth: AuthStateSource) -> Callable[[], None]:
        return auth.on_auth_state_changed(self.on_auth_state_changed)

    async def on_auth_state_changed(self, session: Optional[Session]) -> None:
        ctx = self.context
        logger.info("Auth state changed: %s", session.email or session.uid if session else "logged out")

        previous = ctx.session
        ctx.session = session
        ctx.generation += 1
        if session is None or previous is None or previous.uid != session.uid:
            # cached profile belongs to the previous identity
            ctx.profile = None

        if session is not None:
            if ctx.ready:
                self.evaluate()
            await self.refresh_profile()

        ctx.ready = True
        self.evaluate()

    async def on_segment_changed(self, segment: str) -> Optional[RouteIntent]:
        ctx = self.context
        ctx.segment = normalize_segment(segment)

        # Onboarding may have written the profile after we last read it
        if (
            ctx.segment == HOME_SEGMENT
            and ctx.session is not None
            and ctx.profile is not None
            and ctx.profile.get("profileComplete") is not True
        ):
            logger.info("On home route with incomplete profile, refreshing")
            task = asyncio.ensure_future(self._refresh_and_evaluate())
            self._refreshes.add(task)
            task.add_done_callback(self._refreshes.discard)

        return self.evaluate()

    async def refresh_profile(self) -> Optional[Dict[str, Any]]:
        """
        Fetch the profile for the current session and cache it.

        A failed fetch leaves the profile unknown (None) so the gate waits
        instead of routing to an error. A result that arrives after any auth
        state change since the fetch started is dropped, even for the same uid.
        """
        session = self.context.session
        if session is None:
            return None

        uid = session.uid
        generation = self.context.generation
        try:
            profile = await self._profiles.fetch_profile(uid)
        except Exception as e:
            logger.warning("Profile fetch failed for %s: %s: %s", uid, type(e).__name__, e)
            profile = None

        if self.context.generation != generation:
            logger.info("Dropping profile fetched for superseded session %s", uid)
            return None

        logger.info(
            "Profile refreshed: %s",
            f"profileComplete={profile.get('profileComplete')}" if profile else "null",
        )
        self.context.profile = profile
        return profile

    async def wait_for_refreshes(self) -> None:
        """Wait for background profile refreshes started by route changes."""
        while self._refreshes:
            await asyncio.gather(*list(self._refreshes))

    def evaluate(self) -> Optional[RouteIntent]:
        """
        Decide on the current context and issue the redirect, if any.

        Returns None while loading. Re-evaluating unchanged inputs returns the
        same intent without calling the router again.
        """
        ctx = self.context
        if not ctx.ready:
            logger.debug("Gate loading, no routing decision")
            return None

        inputs = build_inputs(ctx.session, ctx.profile, ctx.segment)
        intent = decide_inputs(inputs)
        if inputs == ctx.last_inputs:
            return intent
        ctx.last_inputs = inputs

        logger.debug(
            "Navigation check: has_session=%s profile_complete=%s route=%s",
            inputs.has_session, inputs.profile_complete, inputs.segment or "index",
        )
        if intent.redirect:
            logger.info("Redirecting to %s (%s)", intent.destination.value, intent.reason)
            self._router.replace(intent.destination.value)
        else:
            logger.debug("Staying on current route (%s)", intent.reason)
        return intent

    async def _refresh_and_evaluate(self) -> None:
        await self.refresh_profile()
        self.evaluate()
