"""Flask CLI commands for account administration."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from app.container import get_services
from app.models.user import Role
from app.services._shared.errors import ConflictError
from app.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Account administration commands."""


@users_cli.command("create-admin")
@click.option("--email", required=True, help="Login email of the administrator.")
@click.password_option("--password", help="Password (prompted when omitted).")
@click.option(
    "--promote",
    is_flag=True,
    help="Grant ADMIN to an existing account instead of failing.",
)
@with_appcontext
def create_admin(email: str, password: str, promote: bool) -> None:
    """Create an ADMIN account (or promote an existing one with --promote)."""
    if len(password) < 6:
        raise click.BadParameter("must be at least 6 characters", param_hint="--password")

    services = get_services()
    try:
        out = services.sessions.signup_with_role(email, password, Role.ADMIN)
    except ConflictError as exc:
        if not promote:
            raise click.ClickException(f"{exc}. Use --promote to grant ADMIN.") from exc
        with SQLAlchemyUnitOfWork() as uow:
            user = uow.users.get_by_email(email)
            if user is None:  # pragma: no cover - deleted between the two calls
                raise click.ClickException(str(exc)) from exc
            user.role = Role.ADMIN
            user_id = user.id
        LOGGER.info("User promoted to ADMIN", extra={"user_id": user_id})
        click.echo(f"Promoted {email} (id={user_id}) to ADMIN.")
        return

    click.echo(f"Created ADMIN {out.email} (id={out.id}).")


@users_cli.command("revoke-sessions")
@click.option("--email", required=True, help="Account whose refresh tokens are revoked.")
@with_appcontext
def revoke_sessions(email: str) -> None:
    """Delete every refresh token of an account (issued access tokens stay valid)."""
    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        user = uow.users.get_by_email(email)
        if user is None:
            raise click.ClickException(f"User not found: {email}")
        user_id = user.id

    removed = get_services().refresh_store.delete_all_for_user(user_id)
    LOGGER.info("Refresh tokens revoked", extra={"user_id": user_id})
    click.echo(f"Revoked {removed} refresh token(s) for {email}.")
