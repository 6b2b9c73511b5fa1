"""
Ambient client metadata readers.

The event store asks its reader for the user agent and referrer at the
moment an event is recorded.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol


class EnvironmentReader(Protocol):
    def user_agent(self) -> Optional[str]:
        ...

    def referrer(self) -> Optional[str]:
        ...


@dataclass
class StaticEnvironment:
    """Fixed metadata (CLI runs and tests)."""

    agent: Optional[str] = None
    referrer_url: Optional[str] = None

    def user_agent(self) -> Optional[str]:
        return self.agent

    def referrer(self) -> Optional[str]:
        return self.referrer_url


_request_user_agent: ContextVar[Optional[str]] = ContextVar("request_user_agent", default=None)
_request_referrer: ContextVar[Optional[str]] = ContextVar("request_referrer", default=None)


class RequestEnvironment:
    """
    Metadata of the HTTP request currently being handled.

    Values are bound per request with bind(); outside a binding the
    fallback values are returned.
    """

    def __init__(self, fallback: Optional[StaticEnvironment] = None):
        self.fallback = fallback or StaticEnvironment()

    @contextmanager
    def bind(self, user_agent: Optional[str], referrer: Optional[str]) -> Iterator[None]:
        ua_token = _request_user_agent.set(user_agent)
        ref_token = _request_referrer.set(referrer)
        try:
            yield
        finally:
            _request_user_agent.reset(ua_token)
            _request_referrer.reset(ref_token)

    def user_agent(self) -> Optional[str]:
        value = _request_user_agent.get()
        return value if value is not None else self.fallback.user_agent()

    def referrer(self) -> Optional[str]:
        value = _request_referrer.get()
        return value if value is not None else self.fallback.referrer()
