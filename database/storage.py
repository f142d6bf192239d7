import json
import logging
import os
import tempfile

from config import Config

logger = logging.getLogger(__name__)


class SnapshotStorage:
    """
    Named JSON snapshots in one directory.

    Each name maps to ``<directory>/<name>.json``. A save replaces the whole
    file; there is no merging, so the last writer wins.
    """

    def __init__(self, directory=None):
        self.directory = directory or Config.STORAGE_DIR

    def path_for(self, name):
        return os.path.join(self.directory, f"{name}.json")

    def load(self, name, default=None):
        path = self.path_for(name)
        if not os.path.exists(path):
            logger.debug("🔧 Debug: No snapshot at %s, starting empty", path)
            return default
        try:
            with open(path, encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Unreadable snapshot %s, starting empty: %s", path, e)
            return default

    def save(self, name, data):
        os.makedirs(self.directory, exist_ok=True)
        path = self.path_for(name)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{name}.", suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug("🔧 Debug: Snapshot %s written", name)

    def delete(self, name):
        path = self.path_for(name)
        if os.path.exists(path):
            os.remove(path)


def get_storage(directory=None):
    """Return the snapshot storage for the configured directory"""
    return SnapshotStorage(directory)
