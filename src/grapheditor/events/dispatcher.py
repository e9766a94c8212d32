"""Event dispatcher that routes editor events to the host's listener."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from grapheditor.events.listener import CATCH_ALL_KEY, HANDLER_METHODS

logger = logging.getLogger(__name__)


def _resolve(listener: Any, name: str) -> tuple[Callable[..., Any] | None, Callable[..., Any] | None]:
    """Find the named handler and the catch-all handler on *listener*."""
    if listener is None:
        return None, None
    if isinstance(listener, Mapping):
        named = listener.get(name)
        catch_all = listener.get(CATCH_ALL_KEY)
    else:
        method_name = HANDLER_METHODS.get(name)
        named = getattr(listener, method_name, None) if method_name else None
        catch_all = getattr(listener, "on_event", None)
    return (
        named if callable(named) else None,
        catch_all if callable(catch_all) else None,
    )


class EventDispatcher:
    """Delivers each event to a named handler, then to a catch-all handler.

    Either handler may be missing. By default (``strict=True``) an
    exception raised by a handler propagates to the caller. With
    ``strict=False`` dispatch is best-effort: the failure is logged and
    the remaining handler still runs.
    """

    def __init__(self, listener: Any = None, *, strict: bool = True) -> None:
        self.listener = listener
        self._strict = strict

    @property
    def active(self) -> bool:
        """True if a listener is registered."""
        return self.listener is not None

    @property
    def strict(self) -> bool:
        return self._strict

    def fire_event(self, name: str, subject: Any = None, payload: Any = None) -> None:
        """Invoke ``handler(subject, payload)`` then ``catch_all(name, subject, payload)``."""
        name = str(name)
        named, catch_all = _resolve(self.listener, name)
        if named is not None:
            self._call(named, name, subject, payload)
        if catch_all is not None:
            self._call(catch_all, name, name, subject, payload)

    def _call(self, handler: Callable[..., Any], name: str, *args: Any) -> None:
        try:
            handler(*args)
        except Exception:
            if self._strict:
                raise
            logger.warning(
                "Listener %r failed on %s",
                handler,
                name,
                exc_info=True,
            )
