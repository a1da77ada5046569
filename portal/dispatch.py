"""Action dispatch for single-endpoint request handlers.

A request body names an ``action``; the dispatcher looks up the handler
registered for it, runs the admin check when the handler demands one
(before the payload is even parsed), validates the payload against the
handler's schema and returns the handler's response body.
"""

import logging
from collections.abc import Iterable
from typing import Any, ClassVar

import pydantic
from pydantic import BaseModel

from portal.auth.authorizer import AdminAuthorizer, AdminIdentity
from portal.exceptions import ValidationError

logger = logging.getLogger(__name__)


class RequestContext(BaseModel):
    """Transport-level credentials attached to a request.

    Attributes:
        bearer_token: Staff JWT from the ``Authorization`` header.
        session_token: Client session token from the session header.
        admin: Admin identity, set once the admin check has passed.
    """

    bearer_token: str | None = None
    session_token: str | None = None
    admin: AdminIdentity | None = None


class ActionHandler:
    """Handles one named action.

    Subclasses set ``action``, ``payload_model`` and optionally
    ``requires_admin``, and implement ``handle``.
    """

    action: ClassVar[str]
    payload_model: ClassVar[type[BaseModel]]
    requires_admin: ClassVar[bool] = False

    def handle(self, payload: Any, context: RequestContext) -> dict[str, Any]:
        raise NotImplementedError


def _describe_errors(error: pydantic.ValidationError) -> str:
    """Turn pydantic errors into one readable message."""
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "body"
        if item["type"] == "missing":
            parts.append(f"{field} is required")
        else:
            parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


class RequestRouter:
    """Maps action names to handlers and runs them."""

    def __init__(
        self,
        handlers: Iterable[ActionHandler],
        authorizer: AdminAuthorizer | None = None,
    ):
        self.handlers: dict[str, ActionHandler] = {}
        for handler in handlers:
            if handler.action in self.handlers:
                raise ValueError(f"Duplicate handler for action {handler.action!r}")
            if handler.requires_admin and authorizer is None:
                raise ValueError(f"Action {handler.action!r} requires an authorizer")
            self.handlers[handler.action] = handler
        self.authorizer = authorizer

    @property
    def actions(self) -> list[str]:
        """Names of the registered actions."""
        return sorted(self.handlers)

    def dispatch(self, body: Any, context: RequestContext) -> dict[str, Any]:
        """Run the handler named by ``body["action"]``.

        Args:
            body: Decoded JSON request body.
            context: Transport credentials.

        Returns:
            dict: Response body.

        Raises:
            PortalError: Any error raised by the authorizer or the handler.
        """
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")

        action = body.get("action")
        handler = self.handlers.get(action) if isinstance(action, str) else None
        if handler is None:
            raise ValidationError("Invalid action")

        if handler.requires_admin:
            context.admin = self.authorizer.authorize_admin(context.bearer_token)

        fields = {key: value for key, value in body.items() if key != "action"}
        try:
            payload = handler.payload_model.model_validate(fields)
        except pydantic.ValidationError as e:
            raise ValidationError(_describe_errors(e)) from e

        logger.debug(f"Dispatching action {action}")
        return handler.handle(payload, context)
