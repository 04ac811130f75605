import logging
import os
import uuid
from datetime import datetime, timezone

from app.core import config
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class AssetStore:
    """
    Writes uploaded files into the content directory served under the
    public uploads mount and hands back the path relative to that mount.
    """

    MAX_NAME_ATTEMPTS = 5

    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = root
        self.url_prefix = url_prefix.rstrip("/")

    def _generate_filename(self, original_filename: str) -> str:
        """Generate unique filename"""
        ext = os.path.splitext(os.path.basename(original_filename or ""))[1].lower()
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")[:-3]
        unique_id = uuid.uuid4().hex[:8]
        return f"{timestamp}_{unique_id}{ext}"

    def _ensure_root(self):
        try:
            os.makedirs(self.root, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Unable to create upload directory: {e.strerror or e}") from e

    def store(self, content: bytes, original_filename: str) -> str:
        """
        Persist file bytes under a fresh name.

        Args:
            content: Raw file bytes
            original_filename: Client supplied name, only its extension is kept

        Returns:
            Path relative to the public mount, e.g. "/uploads/<name>"

        Raises:
            StorageError: If the file cannot be written
        """
        self._ensure_root()

        for _ in range(self.MAX_NAME_ATTEMPTS):
            filename = self._generate_filename(original_filename)
            destination = os.path.join(self.root, filename)
            try:
                # "xb" refuses to overwrite an existing file
                with open(destination, "xb") as fh:
                    fh.write(content)
            except FileExistsError:
                logger.warning(f"Upload name collision on {filename}, generating a new name")
                continue
            except OSError as e:
                self._remove_partial(destination)
                logger.error(f"Failed to write upload {filename}: {str(e)}")
                raise StorageError("Failed to store uploaded file") from e

            logger.info(f"Stored upload {filename} ({len(content)} bytes)")
            return f"{self.url_prefix}/{filename}"

        raise StorageError("Could not allocate a unique name for the uploaded file")

    def discard(self, relative_path: str) -> bool:
        """Remove a file previously returned by store(); False if it is not ours or already gone"""
        if not relative_path or not relative_path.startswith(f"{self.url_prefix}/"):
            return False

        filename = os.path.basename(relative_path)
        try:
            os.remove(os.path.join(self.root, filename))
        except FileNotFoundError:
            return False
        logger.info(f"Discarded upload {filename}")
        return True

    @staticmethod
    def _remove_partial(path: str):
        try:
            os.remove(path)
        except OSError:
            pass


def get_asset_store() -> AssetStore:
    return AssetStore(config.UPLOAD_DIR, config.UPLOAD_URL_PREFIX)
