"""MathQuest CLI application using Typer.

This module provides command-line utilities for the MathQuest backend:
database initialization, role seeding, creating the first administrator,
and secret generation for deployment configuration.
"""

import asyncio
import secrets

import typer
from rich.console import Console
from rich.table import Table

from mathquest.domain.shared import InvalidArgumentError
from mathquest.domain.user import RoleName, User
from mathquest.infrastructure.persistence.sqlalchemy.database import (
    create_engine,
    create_session_maker,
)
from mathquest.infrastructure.persistence.sqlalchemy.init_db import (
    create_tables,
    init_database,
    seed_roles,
)
from mathquest.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)
from mathquest_auth import PasswordHashingService, WeakPasswordError
from mathquest_config.settings import get_settings

app = typer.Typer(
    name="mathquest",
    help="MathQuest backend CLI",
    no_args_is_help=True,
)
console = Console()

db_app = typer.Typer(
    name="db",
    help="Database utilities",
    no_args_is_help=True,
)
users_app = typer.Typer(
    name="users",
    help="User management",
    no_args_is_help=True,
)
secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)
app.add_typer(users_app)
app.add_typer(secrets_app)


def _database_display(database_url: str) -> str:
    return database_url.split("@")[-1] if "@" in database_url else database_url


async def _init_db() -> None:
    engine = create_engine(get_settings().database_url)
    try:
        await init_database(engine, create_session_maker(engine))
    finally:
        await engine.dispose()


async def _seed_roles() -> list[RoleName]:
    engine = create_engine(get_settings().database_url)
    try:
        return await seed_roles(create_session_maker(engine))
    finally:
        await engine.dispose()


@db_app.command("init")
def db_init() -> None:
    """Create missing tables and seed the role catalogue."""
    settings = get_settings()
    console.print(f"Database: [cyan]{_database_display(settings.database_url)}[/cyan]")
    asyncio.run(_init_db())
    console.print("[bold green]Database initialized.[/bold green]")


@db_app.command("seed-roles")
def db_seed_roles() -> None:
    """Insert any missing role rows. Safe to run repeatedly."""
    added = asyncio.run(_seed_roles())

    table = Table(title="Roles")
    table.add_column("id", justify="right")
    table.add_column("name")
    table.add_column("status")
    for role in RoleName:
        table.add_row(
            str(role.role_id),
            role.value,
            "[green]added[/green]" if role in added else "[dim]present[/dim]",
        )
    console.print(table)


async def _create_admin(  # noqa: PLR0913
    first_name: str,
    last_name: str,
    username: str,
    email: str,
    password: str,
) -> str | None:
    settings = get_settings()
    engine = create_engine(settings.database_url)
    session_maker = create_session_maker(engine)
    try:
        await create_tables(engine)
        await seed_roles(session_maker)
        async with session_maker() as session:
            repo = UserRepositorySQLAlchemy(session)
            password_service = PasswordHashingService(rounds=settings.bcrypt_rounds)
            if await repo.exists_by_username(username):
                return f"Username already taken: {username}"
            if await repo.exists_by_email(email):
                return f"Email already in use: {email}"

            try:
                user = User.create(
                    first_name=first_name,
                    last_name=last_name,
                    username=username,
                    email=email,
                    password_hash=password_service.hash(password),
                    roles=[RoleName.ADMIN],
                )
            except (WeakPasswordError, InvalidArgumentError) as e:
                return e.message

            await repo.save(user)
            await session.commit()
    finally:
        await engine.dispose()
    return None


@users_app.command("create-admin")
def create_admin(
    username: str = typer.Option(..., prompt=True),
    email: str = typer.Option(..., prompt=True),
    first_name: str = typer.Option("Admin", prompt=True),
    last_name: str = typer.Option("User", prompt=True),
    password: str = typer.Option(
        ...,
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
    ),
) -> None:
    """Create an administrator account with a permanent password."""
    error = asyncio.run(_create_admin(first_name, last_name, username, email, password))
    if error:
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]Administrator {username} created.[/bold green]")


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for MathQuest configuration.

    Generates two required secrets:
    - JWT_SECRET_KEY: Secret for signing JWT authentication tokens
    - POSTGRES_PASSWORD: Database password

    Copy the output to your .env file.
    """
    console.print("\n[bold green]MathQuest Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 bytes of entropy for HS256
    jwt_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")

    db_password = secrets.token_urlsafe(32)
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={db_password}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
