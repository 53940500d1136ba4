from __future__ import annotations

import uvicorn
from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.management.base import CommandParser


class Command(BaseCommand):
    help = "Serve the ASGI application (Django + Socket.IO relay) with uvicorn"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--host",
            dest="host",
            default="0.0.0.0",  # noqa: S104
            help="Interface to bind (default: 0.0.0.0)",
        )
        parser.add_argument(
            "--port",
            dest="port",
            type=int,
            default=settings.RELAY_PORT,
            help="Port to bind (default: PORT env or 8800)",
        )
        parser.add_argument(
            "--reload",
            action="store_true",
            help="Restart the server when code changes (development only)",
        )

    def handle(self, *args, **options) -> str | None:
        host: str = options["host"]
        port: int = options["port"]
        self.stdout.write(f"Server running on port {port}")
        uvicorn.run(
            "config.asgi:application",
            host=host,
            port=port,
            reload=options["reload"],
            log_config=None,
        )
        return None
