"""
File Upload Service
Accepts multipart uploads, stores them under randomized names and serves
them back together with a static asset directory
"""
import os
import sys
import logging
import argparse
from flask import Flask, Request

from upload_service.config import Config, UploadSettings, load_settings
from upload_service.metrics import UploadMetrics
from upload_service.routes import init_routes
from upload_service.storage import FileStore

logger = logging.getLogger(__name__)


class UploadRequest(Request):
    """Request whose form parser raises on malformed bodies instead of returning nothing."""

    def make_form_data_parser(self):
        parser = super().make_form_data_parser()
        parser.silent = False
        return parser


def configure_logging(level: str = Config.LOG_LEVEL, log_file: str = Config.LOG_FILE):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=handlers
    )


def create_app(settings: UploadSettings = None, metrics: UploadMetrics = None) -> Flask:
    """Build the Flask app for ``settings``; nothing is created on disk here."""
    settings = settings or load_settings()
    metrics = metrics or UploadMetrics()

    app = Flask(
        __name__,
        static_folder=os.path.abspath(settings.static_dir),
        static_url_path=''
    )
    app.request_class = UploadRequest
    app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_size
    app.config['UPLOAD_DIR'] = os.path.abspath(settings.upload_dir)
    app.config['UPLOAD_SETTINGS'] = settings

    store = FileStore(app.config['UPLOAD_DIR'], prefix_length=settings.prefix_length)
    init_routes(app, settings, store, metrics)
    return app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='File upload and retrieval server')
    parser.add_argument('--hostname', help=f'Base URL used in upload responses (default: {Config.HOSTNAME})')
    parser.add_argument('--host', help=f'Interface to listen on (default: {Config.HOST})')
    parser.add_argument('--port', type=int, help=f'Port number for the server (default: {Config.PORT})')
    parser.add_argument('--upload-dir', help=f'Directory uploads are stored in (default: {Config.UPLOAD_DIR})')
    parser.add_argument('--static-dir', help=f'Directory served at / (default: {Config.STATIC_DIR})')
    parser.add_argument('--url-prefix', help=f'Path uploaded files are served under (default: {Config.URL_PREFIX})')
    parser.add_argument('--access-log', action=argparse.BooleanOptionalAction, default=None,
                        help='Log every GET for an uploaded file')
    parser.add_argument('--case-insensitive-extensions', action=argparse.BooleanOptionalAction, default=None,
                        help='Match disallowed extensions regardless of case')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging()

    settings = load_settings(
        hostname=args.hostname,
        host=args.host,
        port=args.port,
        upload_dir=args.upload_dir,
        static_dir=args.static_dir,
        url_prefix=args.url_prefix,
        access_log=args.access_log,
        case_insensitive_extensions=args.case_insensitive_extensions,
    )
    app = create_app(settings)

    logger.info(f"Server started on {settings.host}:{settings.port}")
    try:
        app.run(host=settings.host, port=settings.port, threaded=True)
    except OSError as e:
        logger.critical(f"Unable to listen on {settings.host}:{settings.port}: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
