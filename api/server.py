"""
Command line entry point for Service D.

Run from the project root:
  python -m api.server --port 8080

Flags override the matching environment variables (HOST, PORT,
STATIC_DIR, LOG_LEVEL).
"""

import argparse
import logging

import uvicorn

from api.main import create_app
from core.config import get_settings, validate_log_level, validate_port

logger = logging.getLogger("serviced.server")


def _port(value):
    try:
        return validate_port(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _log_level(value):
    try:
        return validate_log_level(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser():
    parser = argparse.ArgumentParser(prog="service-d", description="Serve the Service D landing page and static files")
    parser.add_argument("--host", help="Bind address (default: $HOST or 0.0.0.0)")
    parser.add_argument("--port", type=_port, help="Port to listen on (default: $PORT or 8000)")
    parser.add_argument("--static-dir", help="Directory of static files (default: $STATIC_DIR or ./wwwroot)")
    parser.add_argument("--log-level", type=_log_level, help="Logging level (default: $LOG_LEVEL or INFO)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = get_settings().with_overrides(
        host=args.host,
        port=args.port,
        static_dir=args.static_dir,
        log_level=args.log_level,
    )
    app = create_app(settings)
    logger.info("Service D listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
