import click


@click.group()
def main() -> None:
    """Generative Computer - a desktop workspace shared with a coding agent."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from GENCOMP_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from GENCOMP_PORT or 3001).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the runtime server."""
    import uvicorn

    from gencomputer.runtime.settings import GenComputerSettings

    settings = GenComputerSettings()

    uvicorn.run(
        "gencomputer.runtime.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


if __name__ == "__main__":
    main()
