from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .controller import ContextController

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]

STATUS_OK = "ok"
STATUS_NOT_IMPLEMENTED = "not_implemented"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class ChannelResponse:
    """Reply to one channel call.

    Attributes:
        status: "ok", "not_implemented" or "error".
        value: Handler result for "ok" replies (a bool for the built-in methods).
        message: Diagnostic text for the other statuses.
    """

    status: str
    value: Any = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    @classmethod
    def success(cls, value: Any) -> "ChannelResponse":
        return cls(STATUS_OK, value)

    @classmethod
    def not_implemented(cls, method: str) -> "ChannelResponse":
        return cls(STATUS_NOT_IMPLEMENTED, message=f"Method not implemented: {method}")


def _context_name(arguments: Any) -> Optional[str]:
    if isinstance(arguments, str):
        return arguments
    if isinstance(arguments, dict):
        name = arguments.get("context", arguments.get("contextName"))
        return name if isinstance(name, str) else None
    return None


class ControlChannel:
    """String-keyed request surface the UI layer talks to.

    Requests are dispatched through a method-name table, so new methods can be
    added with ``register`` without touching the dispatcher. Calls never raise:
    unknown methods yield a not-implemented reply and handler exceptions an
    error reply.
    """

    def __init__(self, controller: ContextController) -> None:
        self.controller = controller
        self._handlers: Dict[str, Handler] = {
            "isSupported": lambda _args: controller.probe_capability(),
            "initialize": lambda _args: controller.initialize(),
            "setContext": lambda args: controller.activate(_context_name(args)),
            "clear": lambda _args: controller.clear(),
        }

    def register(self, method: str, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers[method] = handler

    def methods(self) -> List[str]:
        return sorted(self._handlers)

    def invoke(self, method: str, arguments: Any = None) -> ChannelResponse:
        handler = self._handlers.get(method) if isinstance(method, str) else None
        if handler is None:
            logger.debug("Channel call to unknown method %r", method)
            return ChannelResponse.not_implemented(method if isinstance(method, str) else repr(method))
        try:
            return ChannelResponse.success(handler(arguments))
        except Exception as e:
            logger.error("Channel method %s failed", method, exc_info=True)
            return ChannelResponse(STATUS_ERROR, message=f"{type(e).__name__}: {e}")


__all__ = ["ChannelResponse", "ControlChannel", "STATUS_OK", "STATUS_NOT_IMPLEMENTED", "STATUS_ERROR"]
