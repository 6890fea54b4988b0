"""In-process session for CLI commands."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from cityhealth.application.di import create_container
from cityhealth.application.shell import ApplicationShell
from cityhealth.config import Config, configure_logging


@asynccontextmanager
async def open_session(
    *,
    accept_language: str | None = None,
    boot: bool = True,
) -> AsyncIterator[ApplicationShell]:
    """Build the container, boot the shell and close everything on exit."""
    config = Config()  # type: ignore[call-arg]
    configure_logging(config.logging)

    container = create_container(config)
    try:
        shell = ApplicationShell(container)
        if boot:
            await shell.boot(accept_language)
        yield shell
    finally:
        await container.close()
