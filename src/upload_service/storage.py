"""Upload storage: naming rules and writing uploaded streams to disk."""

import os
import random
import string
import logging
from typing import BinaryIO, Optional, Tuple

from upload_service.errors import UploadStorageError

logger = logging.getLogger(__name__)

PREFIX_CHARSET = string.ascii_letters + string.digits
COPY_CHUNK_SIZE = 1024 * 1024  # 1MB
FILE_MODE = 0o666

# Seeded once from the OS; SystemRandom keeps no shared state between threads.
_rng = random.SystemRandom()


def base_name(filename: str) -> str:
    """Last path component of a client filename, for either separator."""
    return filename.replace('\\', '/').rsplit('/', 1)[-1]


def file_extension(filename: str) -> str:
    """Suffix from the last dot of the final path component, dot included.

    Returns an empty string when that component has no dot. A trailing dot
    yields ``"."`` and a dotfile such as ``.bashrc`` is all extension.
    """
    name = base_name(filename)
    index = name.rfind('.')
    if index == -1:
        return ''
    return name[index:]


def sanitize_filename(filename: str) -> str:
    return base_name(filename).replace(' ', '_')


def random_prefix(length: int, rng: Optional[random.Random] = None) -> str:
    rng = rng or _rng
    return ''.join(rng.choice(PREFIX_CHARSET) for _ in range(length))


def storage_filename(filename: str, prefix_length: int = 6,
                     rng: Optional[random.Random] = None) -> str:
    """Name an upload is written under: ``<random prefix>_<sanitized name>``."""
    return f"{random_prefix(prefix_length, rng)}_{sanitize_filename(filename)}"


class FileStore:
    """Writes uploaded streams into a single flat directory."""

    def __init__(self, upload_dir: str, prefix_length: int = 6,
                 rng: Optional[random.Random] = None):
        self.upload_dir = upload_dir
        self.prefix_length = prefix_length
        self.rng = rng

    def ensure_directory(self):
        try:
            os.makedirs(self.upload_dir, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating upload directory {self.upload_dir}: {e}")
            raise UploadStorageError('Unable to create directory') from e

    def path_for(self, storage_name: str) -> str:
        return os.path.join(self.upload_dir, storage_name)

    def save(self, stream: BinaryIO, filename: str) -> Tuple[str, int]:
        """Copy ``stream`` to a new randomized name; returns (name, bytes written).

        The destination is opened without O_EXCL, so a name collision
        overwrites. Bytes written before a copy failure are left in place.
        """
        storage_name = storage_filename(filename, self.prefix_length, self.rng)
        path = self.path_for(storage_name)

        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        except (OSError, ValueError) as e:
            logger.error(f"Error creating file on server {path}: {e}")
            raise UploadStorageError('Unable to create file on server') from e

        written = 0
        try:
            with os.fdopen(fd, 'wb') as out:
                for chunk in iter(lambda: stream.read(COPY_CHUNK_SIZE), b''):
                    out.write(chunk)
                    written += len(chunk)
        except (OSError, ValueError) as e:
            logger.error(f"Error saving file on server {path} after {written} bytes: {e}")
            raise UploadStorageError('Unable to save file on server') from e

        return storage_name, written
