import logging
import os

from auth.store import AccountStore
from config import Config
from database.models import ROLE_ADMIN
from database.storage import get_storage

logger = logging.getLogger(__name__)

SNAPSHOT_NAMES = (
    Config.AUTH_STORAGE_NAME,
    Config.TICKET_STORAGE_NAME,
    Config.SETTINGS_STORAGE_NAME,
)


def init_storage(storage=None):
    """Create the storage directory and seed the default admin account"""
    storage = storage or get_storage()
    os.makedirs(storage.directory, exist_ok=True)
    _create_default_admin(storage)
    logger.info("Storage initialized at %s", storage.directory)
    return storage


def _create_default_admin(storage):
    """Seed the administrator from configuration if that mobile is not registered yet"""
    mobile = Config.DEFAULT_ADMIN_MOBILE
    password = Config.DEFAULT_ADMIN_PASSWORD
    if not mobile or not password:
        logger.debug("🔧 Debug: No default admin configured")
        return None

    accounts = AccountStore(storage)
    if accounts.check_exists(mobile):
        return None
    admin = accounts.register_account(
        {'mobile': mobile, 'username': Config.DEFAULT_ADMIN_USERNAME, 'password': password},
        role=ROLE_ADMIN,
    )
    logger.info("Default admin account created for %s", mobile)
    return admin


def reset_storage(storage=None):
    """Drop every snapshot and recreate the defaults (Admin only)"""
    storage = storage or get_storage()
    for name in SNAPSHOT_NAMES:
        storage.delete(name)
    logger.warning("All snapshots deleted from %s", storage.directory)
    return init_storage(storage)
