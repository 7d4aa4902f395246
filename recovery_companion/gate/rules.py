"""
Navigation gate decision.

Decides which screen the mobile client should be on from three inputs:
whether a session exists, whether the profile is loaded and complete, and the
first segment of the current route. The decision is an ordered table of
rules; the first rule whose predicate matches wins.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Tuple


class Destination(str, Enum):
    """Routes the gate can redirect to"""
    LOGIN = "/login"
    ONBOARDING = "/onboarding"
    HOME = "/"
    DAILY_TRACKING = "/daily-tracking"


LOGIN_SEGMENT = "login"
ONBOARDING_SEGMENT = "onboarding"
DAILY_TRACKING_SEGMENT = "daily-tracking"
HOME_SEGMENT = ""


@dataclass(frozen=True)
class Session:
    """Authenticated identity of the current user"""
    uid: str
    email: Optional[str] = None


@dataclass(frozen=True)
class GateInputs:
    has_session: bool
    profile_loaded: bool
    profile_complete: Optional[bool]  # None: not loaded, or loaded without the flag
    segment: str


@dataclass(frozen=True)
class RouteIntent:
    destination: Optional[Destination]
    reason: str

    @property
    def redirect(self) -> bool:
        return self.destination is not None


@dataclass(frozen=True)
class GateRule:
    name: str
    predicate: Callable[[GateInputs], bool]
    destination: Optional[Destination]


def normalize_segment(path: Optional[str]) -> str:
    """Reduce a route or path to its first segment ("" for the home route)."""
    if not path:
        return HOME_SEGMENT
    path = path.split("?", 1)[0]
    for part in path.split("/"):
        part = part.strip()
        if part:
            return part
    return HOME_SEGMENT


def profile_completion(profile: Optional[Mapping[str, Any]]) -> Optional[bool]:
    """
    Map a cached profile to its completion state.

    Returns the flag only when it is a bool: None while the profile is not
    loaded and for a loaded profile without the flag.
    """
    if profile is None:
        return None
    flag = profile.get("profileComplete")
    return flag if isinstance(flag, bool) else None


def build_inputs(
    session: Optional[Session],
    profile: Optional[Mapping[str, Any]],
    segment: Optional[str],
) -> GateInputs:
    return GateInputs(
        has_session=session is not None,
        profile_loaded=profile is not None,
        profile_complete=profile_completion(profile),
        segment=normalize_segment(segment),
    )


RULES: Tuple[GateRule, ...] = (
    GateRule(
        "no_session",
        lambda i: not i.has_session and i.segment != LOGIN_SEGMENT,
        Destination.LOGIN,
    ),
    GateRule(
        "awaiting_profile",
        lambda i: i.has_session and not i.profile_loaded and i.segment != LOGIN_SEGMENT,
        None,
    ),
    GateRule(
        "profile_incomplete",
        lambda i: i.has_session and i.profile_complete is False and i.segment != ONBOARDING_SEGMENT,
        Destination.ONBOARDING,
    ),
    GateRule(
        "profile_complete",
        lambda i: i.has_session and i.profile_complete is True
        and i.segment in (LOGIN_SEGMENT, ONBOARDING_SEGMENT),
        Destination.HOME,
    ),
    # Same outcome as "default"; kept as its own rule so the allow is visible
    # in the table and in logs.
    GateRule(
        "daily_tracking",
        lambda i: i.has_session and i.profile_complete is True
        and i.segment == DAILY_TRACKING_SEGMENT,
        None,
    ),
    GateRule("default", lambda i: True, None),
)


def decide_inputs(inputs: GateInputs) -> RouteIntent:
    for rule in RULES:
        if rule.predicate(inputs):
            return RouteIntent(destination=rule.destination, reason=rule.name)
    # RULES ends with a catch-all
    raise RuntimeError("navigation rules table has no default rule")


def decide(
    session: Optional[Session],
    profile: Optional[Mapping[str, Any]],
    segment: Optional[str],
) -> RouteIntent:
    """
    Compute the route intent for the given session, cached profile and route.

    Args:
        session: Current session or None when signed out
        profile: Cached profile dict or None when not loaded yet
        segment: Current route, first segment or full path

    Returns:
        RouteIntent with the redirect destination (None for no redirect)
        and the name of the rule that decided it
    """
    return decide_inputs(build_inputs(session, profile, segment))
