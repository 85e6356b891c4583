#!/usr/bin/env python3
"""
TextureGen server launcher.
Configures logging and serves the FastAPI app with uvicorn.
"""
import sys
import logging
from pathlib import Path
from datetime import datetime

import click


def setup_logging(debug: bool = False, logs_dir: Path | None = None) -> Path:
    """Configure logging to both console and file.

    Returns:
        Path to the log file
    """
    logs_dir = logs_dir or Path.cwd() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Create timestamped log file
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_file = logs_dir / f"server_{timestamp}.log"

    # File handler - always verbose
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    ))

    # Console handler - respects debug flag
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(name)s: %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Keep the SDK and HTTP stack quiet
    logging.getLogger("google_genai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return log_file


@click.command()
@click.option('--host', default="127.0.0.1", show_default=True, help='Interface to bind')
@click.option('--port', default=8000, show_default=True, type=int, help='Port to listen on')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--reload', is_flag=True, help='Reload on code changes (development)')
@click.option('--logs-dir', type=click.Path(file_okay=False, path_type=Path),
              default=None, help='Directory for server log files')
def main(host: str, port: int, debug: bool, reload: bool, logs_dir: Path | None):
    """Launch the TextureGen API server."""
    log_file = setup_logging(debug=debug, logs_dir=logs_dir)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("TextureGen starting")
    logger.info(f"Debug mode: {debug}")
    logger.info(f"Listening on: {host}:{port}")
    logger.info(f"Log file: {log_file}")
    logger.info("=" * 60)

    import uvicorn

    try:
        uvicorn.run(
            "app.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level="debug" if debug else "info",
            log_config=None,  # Keep the handlers configured above
        )
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        raise
    finally:
        logger.info("TextureGen shutdown")


if __name__ == "__main__":
    main()
