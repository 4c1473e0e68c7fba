"""Utility script to create a user in the database."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from anonyma.application.use_cases.users import register_user
from anonyma.domain.errors import MessagingError
from anonyma.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a user for the Anonyma messaging service.",
    )
    parser.add_argument(
        "--username",
        default="admin",
        help="Nombre de usuario (por defecto: admin)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Contraseña del usuario. Si no se proporciona se solicitará interactivamente.",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("Ingrese la contraseña del usuario: ")
    if not password:
        raise SystemExit("No se proporcionó una contraseña válida.")

    initialize_database()

    session = SessionLocal()
    try:
        user = register_user(session, username=args.username, password=password)
    except MessagingError as exc:
        raise SystemExit(f"No se pudo crear el usuario: {exc.message}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Error al guardar el usuario en la base de datos: {exc}") from exc
    else:
        print(
            "Usuario creado exitosamente:\n"
            f"  ID: {user.id}\n"
            f"  Usuario: {user.username}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
