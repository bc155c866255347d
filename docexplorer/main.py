import uvicorn

from docexplorer.api.app import create_app
from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> build the API -> serve it with uvicorn."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting document explorer API ({settings.app_env})")
    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
