"""Client project portal API route."""

from fastapi import APIRouter, Request

from portal.client_auth.router import read_json_body
from portal.client_portal.actions import build_client_portal_router
from portal.dependencies import ClientSessionToken, DbSession
from portal.dispatch import RequestContext

router = APIRouter()


@router.post("")
async def client_portal(
    request: Request,
    db: DbSession,
    session_token: ClientSessionToken,
):
    """Single entry point for the client-facing project views.

    Actions: get_projects, get_project_detail, add_note, delete_note.
    Every action needs a valid client session header.

    Args:
        request: FastAPI request object.
        db: Database session.
        session_token: Client session token.

    Returns:
        dict: Action response body.
    """
    body = await read_json_body(request)
    context = RequestContext(session_token=session_token)
    return build_client_portal_router(db).dispatch(body, context)
