from __future__ import annotations

from typing import Any, Dict, Mapping


class AppFrameworkError(Exception):
    """Base exception for the app framework."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigurationError(AppFrameworkError, ValueError):
    """Raised when descriptors or settings cannot be loaded as configured."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AppFrameworkError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class EvaluationError(AppFrameworkError, ValueError):
    """Raised when a require expression cannot be parsed or evaluated."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        position: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if expression is not None:
            ctx["expression"] = expression
        if position is not None:
            ctx["position"] = position
        AppFrameworkError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)

    @property
    def expression(self) -> str | None:
        return self.context.get("expression")

    @property
    def position(self) -> int | None:
        return self.context.get("position")


__all__ = [
    "AppFrameworkError",
    "ConfigurationError",
    "EvaluationError",
]
