import logging

from config import Config, SmsConfig
from database.models import AlertRecord
from database.storage import get_storage
from errors import ValidationError
from validation.rules import is_valid_mobile

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = ('sms_enabled', 'admin_mobile', 'sms_api_key')
MAX_HISTORY = 100


class AlertSettingsStore:
    """Administrator alert channel settings and the sent-alert history"""

    def __init__(self, storage=None, storage_name=Config.SETTINGS_STORAGE_NAME, sms_config=None):
        self.storage = storage or get_storage()
        self.storage_name = storage_name
        self.sms_config = sms_config or SmsConfig()
        self.reload()

    def reload(self):
        snapshot = self.storage.load(self.storage_name, default={}) or {}
        self.sms_enabled = snapshot.get('sms_enabled', self.sms_config.enabled)
        self.admin_mobile = snapshot.get('admin_mobile', self.sms_config.admin_mobile)
        self.sms_api_key = snapshot.get('sms_api_key', self.sms_config.api_key)
        self.history = [AlertRecord.from_dict(item) for item in snapshot.get('sms_history', [])]

    def _persist(self):
        self.storage.save(self.storage_name, {
            'sms_enabled': self.sms_enabled,
            'admin_mobile': self.admin_mobile,
            'sms_api_key': self.sms_api_key,
            'sms_history': [record.to_dict() for record in self.history],
        })

    def update(self, **changes):
        unknown = set(changes) - set(SETTINGS_FIELDS)
        if unknown:
            raise ValueError(f"Unknown alert settings: {', '.join(sorted(unknown))}")
        admin_mobile = changes.get('admin_mobile')
        if admin_mobile and not is_valid_mobile(admin_mobile):
            raise ValidationError({'admin_mobile': 'Mobile number must be exactly 10 digits'})

        for key, value in changes.items():
            setattr(self, key, value)
        self._persist()
        logger.info("Alert settings updated: %s", ', '.join(sorted(changes)))

    def add_history(self, record):
        self.history.insert(0, record)
        del self.history[MAX_HISTORY:]
        self._persist()

    def clear_history(self):
        self.history = []
        self._persist()
