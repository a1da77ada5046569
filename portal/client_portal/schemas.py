"""Pydantic schemas for the client project portal."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ProjectDetailPayload(BaseModel):
    """Request for one project and its notes."""

    project_id: str = Field(..., min_length=1, max_length=36)


class AddNotePayload(BaseModel):
    """Request to add a note to a project.

    Attributes:
        project_id: Project UUID.
        note_text: Note body.
        note_date: Date the note refers to, defaults to today.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., min_length=1, max_length=36)
    note_text: str = Field(..., min_length=1, max_length=2000)
    note_date: date | None = None


class DeleteNotePayload(BaseModel):
    """Request to delete one of the client's notes."""

    note_id: str = Field(..., min_length=1, max_length=36)


class ServiceInfo(BaseModel):
    """Service nested in a project."""

    id: str
    name: str
    category: str
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProjectResponse(BaseModel):
    """Project as shown to its client."""

    id: str
    title: str
    status: str
    progress: int
    deadline: date | None = None
    start_date: date | None = None
    created_at: datetime | None = None
    services: ServiceInfo | None = None


class NoteResponse(BaseModel):
    """Client note on a project."""

    id: str
    project_id: str
    client_id: str
    note_text: str
    note_date: date
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
