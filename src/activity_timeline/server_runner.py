"""Run the dashboard under uvicorn."""

from __future__ import annotations

import logging
import threading
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import DisplaySettings
from .paths import get_db_path
from .webapp import create_app

logger = logging.getLogger(__name__)

BROWSER_DELAY_SECONDS = 1.0


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    db_path: Optional[Path] = None,
    settings: Optional[DisplaySettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Serve the timeline dashboard until interrupted."""
    resolved_db = Path(db_path or get_db_path())
    app = create_app(db_path=resolved_db, settings=settings)
    url = f"http://{host}:{port}"
    logger.info("Serving timeline from %s at %s", resolved_db, url)

    if open_browser:
        timer = threading.Timer(BROWSER_DELAY_SECONDS, _open_browser, args=(url,))
        timer.daemon = True
        timer.start()

    uvicorn.run(app, host=host, port=port, log_level=log_level)


def _open_browser(url: str) -> None:
    try:
        webbrowser.open_new_tab(url)
    except webbrowser.Error:
        logger.exception("Failed to launch browser for %s", url)
