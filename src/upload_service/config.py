"""
Configuration for File Upload Service
"""
import os
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes', 'on')


class Config:
    HOSTNAME = os.getenv('UPLOAD_HOSTNAME', 'http://localhost')
    HOST = os.getenv('UPLOAD_HOST', '0.0.0.0')
    PORT = int(os.getenv('UPLOAD_PORT', 8080))
    UPLOAD_DIR = os.getenv('UPLOAD_DIR', './uploaded')
    STATIC_DIR = os.getenv('STATIC_DIR', './static')
    URL_PREFIX = os.getenv('UPLOAD_URL_PREFIX', '/uploaded')
    ACCESS_LOG = _env_flag('UPLOAD_ACCESS_LOG', 'true')
    MAX_UPLOAD_SIZE = int(os.getenv('MAX_UPLOAD_SIZE', 2 * 1024 * 1024 * 1024))  # 2GiB
    DISALLOWED_EXTENSIONS = frozenset({'.exe', '.bat', '.cmd', '.msi', '.vbs', '.scr', '.html'})
    CASE_INSENSITIVE_EXTENSIONS = _env_flag('UPLOAD_CASE_INSENSITIVE_EXTENSIONS', 'false')
    PREFIX_LENGTH = 6
    LOG_FILE = os.getenv('LOG_FILE', '')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


def normalize_prefix(prefix: str) -> str:
    """Return ``prefix`` with one leading slash and no trailing slash."""
    prefix = '/' + prefix.strip('/')
    if prefix == '/':
        raise ValueError('URL prefix for uploaded files must not be empty')
    return prefix


@dataclass(frozen=True)
class UploadSettings:
    """Process-wide settings, built once at startup and handed to the routes."""
    hostname: str = Config.HOSTNAME
    host: str = Config.HOST
    port: int = Config.PORT
    upload_dir: str = Config.UPLOAD_DIR
    static_dir: str = Config.STATIC_DIR
    url_prefix: str = Config.URL_PREFIX
    access_log: bool = Config.ACCESS_LOG
    max_upload_size: int = Config.MAX_UPLOAD_SIZE
    disallowed_extensions: FrozenSet[str] = field(default=Config.DISALLOWED_EXTENSIONS)
    case_insensitive_extensions: bool = Config.CASE_INSENSITIVE_EXTENSIONS
    prefix_length: int = Config.PREFIX_LENGTH

    def __post_init__(self):
        object.__setattr__(self, 'hostname', self.hostname.rstrip('/'))
        object.__setattr__(self, 'url_prefix', normalize_prefix(self.url_prefix))
        object.__setattr__(self, 'disallowed_extensions', frozenset(self.disallowed_extensions))
        if self.max_upload_size <= 0:
            raise ValueError('max_upload_size must be positive')
        if self.prefix_length <= 0:
            raise ValueError('prefix_length must be positive')

    def with_overrides(self, **overrides) -> 'UploadSettings':
        """Copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def is_disallowed(self, extension: str) -> bool:
        if self.case_insensitive_extensions:
            return extension.lower() in {ext.lower() for ext in self.disallowed_extensions}
        return extension in self.disallowed_extensions

    def public_url(self, storage_name: str) -> str:
        return f"{self.hostname}{self.url_prefix}/{storage_name}"


def load_settings(**overrides: Optional[object]) -> UploadSettings:
    """Build settings from the environment defaults plus explicit overrides."""
    return UploadSettings().with_overrides(**overrides)
