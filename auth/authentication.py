import hashlib
import hmac
import logging
import secrets

from config import Config

logger = logging.getLogger(__name__)

HASH_ALGORITHM = 'pbkdf2_sha256'


class AuthSystem:
    @staticmethod
    def hash_password(password, salt=None, iterations=None):
        """Hash password using salted PBKDF2-SHA256"""
        salt = salt or secrets.token_hex(16)
        iterations = iterations or Config.PASSWORD_HASH_ITERATIONS
        logger.debug("🔧 Debug: Hashing password (length: %d)", len(password))
        digest = hashlib.pbkdf2_hmac('sha256', password.encode(), salt.encode(), iterations).hex()
        return f"{HASH_ALGORITHM}${iterations}${salt}${digest}"

    @staticmethod
    def verify_password(plain_password, hashed_password):
        """Verify password against hash"""
        if plain_password is None or not hashed_password:
            return False
        try:
            algorithm, iterations, salt, _ = hashed_password.split('$', 3)
            iterations = int(iterations)
        except ValueError:
            return False
        if algorithm != HASH_ALGORITHM:
            return False
        candidate = AuthSystem.hash_password(plain_password, salt=salt, iterations=iterations)
        return hmac.compare_digest(candidate, hashed_password)

    @staticmethod
    def mint_token():
        """Opaque session token, meaningful only inside this app"""
        return f"session-{secrets.token_urlsafe(24)}"
