"""Action handlers for the client authentication endpoint."""

from typing import Any

from sqlalchemy.orm import Session

from portal.activity import log_activity
from portal.auth.authorizer import AdminAuthorizer
from portal.client_auth.schemas import (
    ClientProfile,
    CreateCredentialsPayload,
    EmptyPayload,
    LoginPayload,
    LoginResponse,
    ToggleActivePayload,
    VerifyResponse,
)
from portal.client_auth.service import ClientAuthService
from portal.dispatch import ActionHandler, RequestContext, RequestRouter

ACTIVITY_MODULE = "clients"


class LoginHandler(ActionHandler):
    action = "login"
    payload_model = LoginPayload

    def __init__(self, service: ClientAuthService):
        self.service = service

    def handle(self, payload: LoginPayload, context: RequestContext) -> dict[str, Any]:
        session, client = self.service.login(payload.client_code, payload.password)
        return LoginResponse(
            session_token=session.session_token,
            expires_at=session.expires_at,
            client=ClientProfile.model_validate(client),
        ).model_dump(mode="json")


class VerifyHandler(ActionHandler):
    action = "verify"
    payload_model = EmptyPayload

    def __init__(self, service: ClientAuthService):
        self.service = service

    def handle(self, payload: EmptyPayload, context: RequestContext) -> dict[str, Any]:
        client = self.service.authenticate(context.session_token)
        return VerifyResponse(client=ClientProfile.model_validate(client)).model_dump(mode="json")


class LogoutHandler(ActionHandler):
    action = "logout"
    payload_model = EmptyPayload

    def __init__(self, service: ClientAuthService):
        self.service = service

    def handle(self, payload: EmptyPayload, context: RequestContext) -> dict[str, Any]:
        self.service.logout(context.session_token)
        return {"success": True}


class CreateCredentialsHandler(ActionHandler):
    """Create a client's login, or reset its password and re-enable it."""

    action = "create_credentials"
    payload_model = CreateCredentialsPayload
    requires_admin = True

    def __init__(self, service: ClientAuthService):
        self.service = service

    def handle(
        self, payload: CreateCredentialsPayload, context: RequestContext
    ) -> dict[str, Any]:
        client_code = self.service.credentials.create_or_reset(payload.client_id, payload.password)
        log_activity(
            self.service.db,
            context.admin,
            "update",
            ACTIVITY_MODULE,
            record_id=payload.client_id,
            record_title=client_code,
            details="Client portal credentials created or reset",
        )
        return {"success": True, "client_code": client_code}


class ToggleActiveHandler(ActionHandler):
    """Enable or disable a client's login; disabling revokes all sessions."""

    action = "toggle_active"
    payload_model = ToggleActivePayload
    requires_admin = True

    def __init__(self, service: ClientAuthService):
        self.service = service

    def handle(self, payload: ToggleActivePayload, context: RequestContext) -> dict[str, Any]:
        revoked = self.service.credentials.set_active(payload.client_id, payload.active)
        details = "Client portal login enabled"
        if not payload.active:
            details = f"Client portal login disabled, {revoked} sessions revoked"
        log_activity(
            self.service.db,
            context.admin,
            "update",
            ACTIVITY_MODULE,
            record_id=payload.client_id,
            details=details,
        )
        return {"success": True}


class ListClientsHandler(ActionHandler):
    action = "list_clients"
    payload_model = EmptyPayload
    requires_admin = True

    def __init__(self, service: ClientAuthService):
        self.service = service

    def handle(self, payload: EmptyPayload, context: RequestContext) -> dict[str, Any]:
        clients = self.service.list_clients()
        return {"clients": [client.model_dump(mode="json") for client in clients]}


HANDLER_CLASSES: tuple[type[ActionHandler], ...] = (
    LoginHandler,
    VerifyHandler,
    LogoutHandler,
    CreateCredentialsHandler,
    ToggleActiveHandler,
    ListClientsHandler,
)


def build_client_auth_router(
    db: Session, service: ClientAuthService | None = None
) -> RequestRouter:
    """Wire the client authentication actions for one request.

    Args:
        db: Database session.
        service: Optional preconfigured service.

    Returns:
        RequestRouter: Dispatcher for the client-auth endpoint.
    """
    service = service or ClientAuthService(db)
    return RequestRouter(
        [handler_class(service) for handler_class in HANDLER_CLASSES],
        AdminAuthorizer(db),
    )
