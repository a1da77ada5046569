"""Service for the client project portal."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session, joinedload

from portal.client_portal.schemas import NoteResponse, ProjectResponse, ServiceInfo
from portal.db.database import transaction
from portal.db.models import Client, Project, ProjectClientNote
from portal.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class ClientPortalService:
    """Read a client's projects and manage their project notes.

    Every query is scoped to the authenticated client.

    Attributes:
        db: Database session.
        client: Authenticated client.
    """

    def __init__(self, db: Session, client: Client):
        self.db = db
        self.client = client

    def _project_response(self, project: Project) -> ProjectResponse:
        return ProjectResponse(
            id=project.id,
            title=project.title,
            status=project.status,
            progress=project.progress,
            deadline=project.deadline,
            start_date=project.start_date,
            created_at=project.created_at,
            services=ServiceInfo.model_validate(project.service) if project.service else None,
        )

    def _get_project(self, project_id: str) -> Project:
        project = (
            self.db.query(Project)
            .options(joinedload(Project.service))
            .filter(
                Project.id == project_id,
                Project.client_id == self.client.id,
                Project.is_deleted.is_(False),
            )
            .first()
        )
        if not project:
            raise NotFoundError("Project not found")
        return project

    def list_projects(self) -> list[ProjectResponse]:
        """List the client's projects, newest first."""
        projects = (
            self.db.query(Project)
            .options(joinedload(Project.service))
            .filter(Project.client_id == self.client.id, Project.is_deleted.is_(False))
            .order_by(Project.created_at.desc())
            .all()
        )
        return [self._project_response(p) for p in projects]

    def get_project_detail(self, project_id: str) -> tuple[ProjectResponse, list[NoteResponse]]:
        """Get one of the client's projects with its notes.

        Args:
            project_id: Project UUID.

        Returns:
            tuple: (project, notes newest first).

        Raises:
            NotFoundError: If the project is not the client's.
        """
        project = self._get_project(project_id)
        notes = (
            self.db.query(ProjectClientNote)
            .filter(
                ProjectClientNote.project_id == project.id,
                ProjectClientNote.client_id == self.client.id,
                ProjectClientNote.is_deleted.is_(False),
            )
            .order_by(ProjectClientNote.note_date.desc(), ProjectClientNote.created_at.desc())
            .all()
        )
        return self._project_response(project), [NoteResponse.model_validate(n) for n in notes]

    def add_note(self, project_id: str, note_text: str, note_date=None) -> NoteResponse:
        """Add a note to one of the client's projects.

        Args:
            project_id: Project UUID.
            note_text: Note body.
            note_date: Date the note refers to, defaults to today (UTC).

        Returns:
            NoteResponse: The new note.

        Raises:
            NotFoundError: If the project is not the client's.
        """
        project = self._get_project(project_id)
        note = ProjectClientNote(
            project_id=project.id,
            client_id=self.client.id,
            note_text=note_text.strip(),
            note_date=note_date or datetime.now(UTC).date(),
        )
        with transaction(self.db):
            self.db.add(note)
        self.db.refresh(note)
        logger.info(f"Client {self.client.client_code} added a note to project {project.id}")
        return NoteResponse.model_validate(note)

    def delete_note(self, note_id: str) -> None:
        """Soft-delete one of the client's notes.

        Args:
            note_id: Note UUID.

        Raises:
            NotFoundError: If the note is not the client's.
        """
        note = (
            self.db.query(ProjectClientNote)
            .filter(
                ProjectClientNote.id == note_id,
                ProjectClientNote.client_id == self.client.id,
                ProjectClientNote.is_deleted.is_(False),
            )
            .first()
        )
        if not note:
            raise NotFoundError("Note not found")

        with transaction(self.db):
            note.is_deleted = True
            note.deleted_at = datetime.now(UTC).replace(tzinfo=None)
