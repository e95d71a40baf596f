"""Utility script to send a system announcement to a list of users."""

from __future__ import annotations

import argparse
import asyncio

from sqlalchemy.exc import SQLAlchemyError

from teamhub.bootstrap import build_notification_system
from teamhub.config import get_settings


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the announcement."""

    parser = argparse.ArgumentParser(
        description="Envía una notificación de sistema a uno o más usuarios.",
    )
    parser.add_argument("--title", required=True, help="Título de la notificación")
    parser.add_argument("--body", required=True, help="Texto de la notificación")
    parser.add_argument("--link", default=None, help="Enlace opcional asociado a la notificación")
    parser.add_argument(
        "--recipient",
        dest="recipients",
        action="append",
        required=True,
        help="Identificador del destinatario; repita la opción para varios usuarios",
    )
    return parser.parse_args()


async def send_announcement(args: argparse.Namespace) -> tuple[int, int]:
    """Return how many notifications were created and how many were suppressed."""

    system = await build_notification_system(get_settings())
    created = suppressed = 0
    try:
        for recipient_id in dict.fromkeys(args.recipients):
            notification = await system.service.notify_system(
                recipient_id=recipient_id,
                title=args.title,
                body=args.body,
                link=args.link,
            )
            if notification is None:
                suppressed += 1
            else:
                created += 1
    finally:
        await system.aclose()
    return created, suppressed


def main() -> None:
    """Send the announcement described by the command line arguments."""

    args = parse_args()
    try:
        created, suppressed = asyncio.run(send_announcement(args))
    except SQLAlchemyError as exc:
        raise SystemExit(f"Error al acceder a la base de datos de notificaciones: {exc}") from exc
    print(
        "Anuncio enviado:\n"
        f"  Creadas: {created}\n"
        f"  Omitidas: {suppressed}"
    )


if __name__ == "__main__":
    main()
