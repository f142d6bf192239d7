import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Configuration class for environment variables"""

    # Storage
    STORAGE_DIR = os.getenv('STORAGE_DIR', '.helpdesk_storage')
    AUTH_STORAGE_NAME = 'auth-storage'
    TICKET_STORAGE_NAME = 'ticket-storage'
    SETTINGS_STORAGE_NAME = 'settings-storage'

    # Default admin account, seeded on first start when both are set
    DEFAULT_ADMIN_MOBILE = os.getenv('DEFAULT_ADMIN_MOBILE', '')
    DEFAULT_ADMIN_USERNAME = os.getenv('DEFAULT_ADMIN_USERNAME', 'Administrator')
    DEFAULT_ADMIN_PASSWORD = os.getenv('DEFAULT_ADMIN_PASSWORD', '')

    # Security
    PASSWORD_HASH_ITERATIONS = int(os.getenv('PASSWORD_HASH_ITERATIONS', 260000))

    # SMS alerts
    SMS_ENABLED = os.getenv('SMS_ENABLED', 'False').lower() == 'true'
    SMS_ADMIN_MOBILE = os.getenv('SMS_ADMIN_MOBILE', '')
    SMS_API_KEY = os.getenv('SMS_API_KEY', '')
    SMS_API_URL = os.getenv('SMS_API_URL', 'https://www.fast2sms.com/dev/bulkV2')
    SMS_TIMEOUT = int(os.getenv('SMS_TIMEOUT', 10))

    # App
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    SUBMIT_DELAY_SECONDS = float(os.getenv('SUBMIT_DELAY_SECONDS', 1))

class SmsConfig:
    def __init__(self):
        self.enabled = Config.SMS_ENABLED
        self.admin_mobile = Config.SMS_ADMIN_MOBILE
        self.api_key = Config.SMS_API_KEY
        self.api_url = Config.SMS_API_URL
        self.timeout = Config.SMS_TIMEOUT
