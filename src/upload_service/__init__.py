"""File upload service package.

Import `upload_service.app` explicitly where the Flask app is required;
`create_app` builds it from an `UploadSettings` instance.
"""

__all__ = []
