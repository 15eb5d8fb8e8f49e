"""
Response models for the File Upload Service
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadResult:
    """One stored file: the name written to disk and the link it is served from."""
    filename: str
    url: str

    def to_dict(self):
        return {
            'filename': self.filename,
            'url': self.url,
        }
