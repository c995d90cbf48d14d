"""
Business Dashboard API

Application entry point served by uvicorn/gunicorn as ``bizdash.main:app``.
"""

from bizdash.config import get_settings
from bizdash.serving.api import create_api_app

app = create_api_app()


def run() -> None:
    """Serve the API with uvicorn using the configured host and port"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bizdash.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.monitoring.log_level.lower(),
    )


if __name__ == "__main__":
    run()
