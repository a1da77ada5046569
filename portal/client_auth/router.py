"""Client portal authentication API route."""

from fastapi import APIRouter, Request

from portal.client_auth.actions import build_client_auth_router
from portal.dependencies import BearerToken, ClientSessionToken, DbSession
from portal.dispatch import RequestContext
from portal.exceptions import ValidationError

router = APIRouter()


async def read_json_body(request: Request):
    """Decode the request body as JSON.

    Raises:
        ValidationError: If the body is not valid JSON.
    """
    try:
        return await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON") from e


@router.post("")
async def client_auth(
    request: Request,
    db: DbSession,
    bearer_token: BearerToken,
    session_token: ClientSessionToken,
):
    """Single entry point for client login and credential management.

    The body carries an ``action`` (login, verify, logout,
    create_credentials, toggle_active, list_clients) plus its fields.
    Admin actions need a staff bearer token; client actions read the
    session header.

    Args:
        request: FastAPI request object.
        db: Database session.
        bearer_token: Staff JWT, if sent.
        session_token: Client session token, if sent.

    Returns:
        dict: Action response body.
    """
    body = await read_json_body(request)
    context = RequestContext(bearer_token=bearer_token, session_token=session_token)
    return build_client_auth_router(db).dispatch(body, context)
