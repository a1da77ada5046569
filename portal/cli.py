"""Command-line interface for portal administration."""

import logging
import sys

import click

from portal import __version__


def setup_logging(level: str) -> None:
    """Set up logging configuration.

    Args:
        level: Log level string.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
)
def cli(log_level: str):
    """Client portal administration."""
    setup_logging(log_level)


@cli.command("init-db")
def init_db_command():
    """Create all database tables (development only; use Alembic in production)."""
    from portal.db.database import engine
    from portal.db.models import Base

    Base.metadata.create_all(bind=engine)
    click.echo("Database tables created.")


@cli.command("create-admin")
@click.option("--email", prompt=True, help="Admin login email")
@click.option("--name", "full_name", prompt="Full name", help="Admin full name")
@click.password_option(help="Admin password")
def create_admin(email: str, full_name: str, password: str):
    """Create a staff user with the admin role."""
    from portal.auth.service import AuthService
    from portal.db.database import SessionLocal

    db = SessionLocal()
    try:
        user = AuthService(db).create_admin(email, full_name, password)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    else:
        click.echo(f"Admin {user.email} created.")
    finally:
        db.close()


@cli.command("purge-sessions")
def purge_sessions():
    """Delete expired client portal sessions."""
    from portal.scheduler.session_cleanup import purge_expired_sessions

    result = purge_expired_sessions()
    click.echo(f"Purged {result['sessions_purged']} expired sessions.")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
