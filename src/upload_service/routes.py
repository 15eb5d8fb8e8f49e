"""
Routes for File Upload Service
Separated from app.py for better organization
"""
import os
import json
from datetime import datetime, timezone
from flask import request, send_from_directory
from werkzeug.exceptions import HTTPException
from werkzeug.security import safe_join

from shared.utils import json_response, error_response
from upload_service.errors import UploadError, UploadValidationError, UploadStorageError
from upload_service.models import UploadResult
from upload_service.storage import file_extension


def init_routes(app, settings, store, metrics):
    """Initialize routes with app context"""

    def uploaded_files():
        """Parse the multipart body and return the non-empty ``file`` parts."""
        if request.mimetype != 'multipart/form-data' or 'boundary' not in request.mimetype_params:
            app.logger.error(f"Error parsing multipart form: unexpected content type {request.content_type!r}")
            raise UploadValidationError('Unable to parse form')
        try:
            files = request.files.getlist('file')
        except (HTTPException, ValueError) as e:
            app.logger.error(f"Error parsing multipart form: {e}")
            raise UploadValidationError('Unable to parse form') from e
        # Parts sent with an empty filename are plain form values.
        return [f for f in files if f.filename]

    def open_upload(file_storage):
        try:
            stream = file_storage.stream
            stream.seek(0)
        except (OSError, ValueError) as e:
            app.logger.error(f"Error opening uploaded file: {e}")
            raise UploadStorageError('Unable to open uploaded file') from e
        return stream

    @app.before_request
    def log_uploaded_access():
        """Log each GET under the uploaded-files prefix"""
        if request.method == 'GET' and request.path.startswith(settings.url_prefix + '/'):
            metrics.downloads.inc()
            if settings.access_log:
                app.logger.info(f"GET request to {settings.url_prefix}/: {request.path}")

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return json_response({
            'status': 'healthy',
            'service': 'file-upload',
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

    @app.route('/metrics', methods=['GET'])
    def prometheus_metrics():
        body, content_type = metrics.render()
        return app.response_class(body, mimetype=content_type)

    @app.route('/', methods=['GET'])
    def static_index():
        return send_from_directory(app.static_folder, 'index.html')

    serve_static = app.view_functions['static']

    def static_files(filename):
        """Static files, with a directory path answered by its index.html"""
        directory = safe_join(app.static_folder, filename.rstrip('/'))
        if filename.endswith('/') or (directory and os.path.isdir(directory)):
            filename = filename.rstrip('/') + '/index.html'
        return serve_static(filename=filename)

    app.view_functions['static'] = static_files

    @app.route(f'{settings.url_prefix}/<path:filename>', methods=['GET'])
    def serve_uploaded(filename):
        """Serve a stored upload; traversal and conditional requests are left to werkzeug"""
        return send_from_directory(store.upload_dir, filename)

    @app.route('/upload', methods=['POST'])
    def upload_files():
        """
        Multipart upload endpoint
        Stores every ``file`` part under a randomized name and returns their links
        """
        app.logger.info(f"Received {request.method} request from {request.remote_addr} for URL: {request.path}")

        with metrics.duration.time():
            files = uploaded_files()
            if not files:
                raise UploadValidationError('No files uploaded')

            store.ensure_directory()

            results = []
            for file_storage in files:
                extension = file_extension(file_storage.filename)
                if not extension:
                    raise UploadValidationError('Filename must have an extension')
                if settings.is_disallowed(extension):
                    raise UploadValidationError('Disallowed file extension')

                stream = open_upload(file_storage)
                storage_name, size = store.save(stream, file_storage.filename)
                metrics.record_file(size)
                app.logger.info(f"Stored {file_storage.filename!r} as {storage_name} ({size} bytes)")

                results.append(UploadResult(
                    filename=storage_name,
                    url=settings.public_url(storage_name),
                ))

            try:
                body = json.dumps([result.to_dict() for result in results])
            except (TypeError, ValueError) as e:
                app.logger.error(f"Error marshalling JSON: {e}")
                raise UploadStorageError('Unable to marshal JSON') from e

        metrics.record_request(200)
        return app.response_class(body, status=200, mimetype='application/json')

    @app.errorhandler(UploadError)
    def upload_failed(error):
        """Return only the short message; the cause stays in the server log"""
        if error.__cause__ is not None:
            app.logger.warning(f"Upload rejected ({error.status_code}): {error.message}: {error.__cause__}")
        else:
            app.logger.warning(f"Upload rejected ({error.status_code}): {error.message}")
        metrics.record_request(error.status_code)
        return error_response(error.message, error.status_code)
