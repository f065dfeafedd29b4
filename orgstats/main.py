"""FastAPI static file server for the rendered artifacts"""

from pathlib import Path
from typing import Optional, Union
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from orgstats.config.settings import settings

logger = logging.getLogger(__name__)


def create_app(directory: Optional[Union[str, Path]] = None) -> FastAPI:
    """
    Application serving `directory` at `/`

    `index.html` is the default document of every directory. There are no
    other routes.
    """
    web_root = Path(directory or settings.OUTPUT_DIR)
    web_root.mkdir(parents=True, exist_ok=True)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Organization contribution reports",
        version=settings.APP_VERSION,
    )
    app.mount("/", StaticFiles(directory=str(web_root), html=True), name="web")
    return app


def serve(port: Optional[int] = None, directory: Optional[Union[str, Path]] = None) -> None:
    """Serve until the process is stopped"""
    import uvicorn

    port = port or settings.SERVE_PORT
    print(f"Starting server at http://localhost:{port}")
    logger.info(f"Serving {directory or settings.OUTPUT_DIR} on {settings.SERVE_HOST}:{port}")
    uvicorn.run(create_app(directory), host=settings.SERVE_HOST, port=port)
