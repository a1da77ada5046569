"""Action handlers for the client project portal endpoint."""

from typing import Any

from sqlalchemy.orm import Session

from portal.client_auth.schemas import EmptyPayload
from portal.client_auth.service import ClientAuthService
from portal.client_portal.schemas import (
    AddNotePayload,
    DeleteNotePayload,
    ProjectDetailPayload,
)
from portal.client_portal.service import ClientPortalService
from portal.dispatch import ActionHandler, RequestContext, RequestRouter


class PortalActionHandler(ActionHandler):
    """Handler that runs on behalf of the client owning the session."""

    def __init__(self, db: Session, auth: ClientAuthService):
        self.db = db
        self.auth = auth

    def portal_for(self, context: RequestContext) -> ClientPortalService:
        """Authenticate the session and scope a portal service to its client."""
        client = self.auth.authenticate(context.session_token)
        return ClientPortalService(self.db, client)


class GetProjectsHandler(PortalActionHandler):
    action = "get_projects"
    payload_model = EmptyPayload

    def handle(self, payload: EmptyPayload, context: RequestContext) -> dict[str, Any]:
        projects = self.portal_for(context).list_projects()
        return {"projects": [p.model_dump(mode="json") for p in projects]}


class GetProjectDetailHandler(PortalActionHandler):
    action = "get_project_detail"
    payload_model = ProjectDetailPayload

    def handle(self, payload: ProjectDetailPayload, context: RequestContext) -> dict[str, Any]:
        project, notes = self.portal_for(context).get_project_detail(payload.project_id)
        return {
            "project": project.model_dump(mode="json"),
            "notes": [n.model_dump(mode="json") for n in notes],
        }


class AddNoteHandler(PortalActionHandler):
    action = "add_note"
    payload_model = AddNotePayload

    def handle(self, payload: AddNotePayload, context: RequestContext) -> dict[str, Any]:
        note = self.portal_for(context).add_note(
            payload.project_id, payload.note_text, payload.note_date
        )
        return {"success": True, "note": note.model_dump(mode="json")}


class DeleteNoteHandler(PortalActionHandler):
    action = "delete_note"
    payload_model = DeleteNotePayload

    def handle(self, payload: DeleteNotePayload, context: RequestContext) -> dict[str, Any]:
        self.portal_for(context).delete_note(payload.note_id)
        return {"success": True}


HANDLER_CLASSES: tuple[type[PortalActionHandler], ...] = (
    GetProjectsHandler,
    GetProjectDetailHandler,
    AddNoteHandler,
    DeleteNoteHandler,
)


def build_client_portal_router(db: Session) -> RequestRouter:
    """Wire the client portal actions for one request."""
    auth = ClientAuthService(db)
    return RequestRouter([handler_class(db, auth) for handler_class in HANDLER_CLASSES])
