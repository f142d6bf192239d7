import logging
import uuid

from auth.authentication import AuthSystem
from config import Config
from database.models import ROLE_USER, Account, Session, utc_now
from database.storage import get_storage
from errors import (
    DuplicateAccountError,
    IncorrectCredentialError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationError,
)
from validation.rules import validate_account_input

logger = logging.getLogger(__name__)

EDITABLE_ACCOUNT_FIELDS = ('username', 'mobile')


class AccountStore:
    """
    Registered accounts plus the single active session.

    The session holds its own copy of the logged-in account, so every
    account mutation is applied to both copies. Each successful mutation
    rewrites the whole snapshot before returning.
    """

    def __init__(self, storage=None, storage_name=Config.AUTH_STORAGE_NAME, restore_session=True):
        self.storage = storage or get_storage()
        self.storage_name = storage_name
        self.restore_session = restore_session
        self._accounts = []
        self._session = None
        self.reload()

    def reload(self):
        snapshot = self.storage.load(self.storage_name, default={}) or {}
        self._accounts = [Account.from_dict(item) for item in snapshot.get('accounts', [])]
        session = snapshot.get('session')
        # A store built for a new browser starts logged out
        if self.restore_session:
            self._session = Session.from_dict(session) if session else None
        logger.debug("🔧 Debug: Loaded %d accounts", len(self._accounts))

    def _persist(self):
        self.storage.save(self.storage_name, {
            'accounts': [account.to_dict() for account in self._accounts],
            'session': self._session.to_dict() if self._session else None,
        })

    @property
    def accounts(self):
        return [account.copy() for account in self._accounts]

    @property
    def session(self):
        return self._session

    @property
    def current_account(self):
        return self._session.account if self._session else None

    @property
    def is_authenticated(self):
        return self._session is not None

    @property
    def role(self):
        return self._session.role if self._session else None

    def _find(self, predicate):
        return next((account for account in self._accounts if predicate(account)), None)

    def check_exists(self, mobile):
        return self._find(lambda account: account.mobile == mobile)

    def register_account(self, fields, role=ROLE_USER):
        """Create an account; the mobile number must not be registered yet"""
        candidate = {key: fields.get(key) for key in ('username', 'mobile', 'password')}
        if 'confirm_password' in fields:
            candidate['confirm_password'] = fields['confirm_password']
        result = validate_account_input(candidate)
        if not result.ok:
            raise ValidationError(result.errors)
        mobile = candidate['mobile']
        if self.check_exists(mobile):
            logger.info("Registration rejected, mobile %s already exists", mobile)
            raise DuplicateAccountError(mobile)

        account = Account(
            id=uuid.uuid4().hex,
            mobile=mobile,
            username=candidate['username'],
            password=AuthSystem.hash_password(candidate['password']),
            role=role,
            created_at=utc_now(),
        )
        self._accounts.append(account)
        self._persist()
        logger.info("Registered account %s (%s)", account.id, account.role)
        return account.copy()

    def authenticate(self, mobile, password):
        """Authenticate user against the stored accounts"""
        account = self.check_exists(mobile)
        if account and AuthSystem.verify_password(password, account.password):
            logger.debug("🔧 Debug: User authenticated successfully: %s", mobile)
            return account.copy()
        logger.debug("🔧 Debug: Authentication failed for %s", mobile)
        return None

    def login(self, account, token=None):
        self._session = Session(account=account.copy(), token=token or AuthSystem.mint_token())
        self._persist()
        logger.info("Session started for account %s", account.id)
        return self._session

    def logout(self):
        self._session = None
        self._persist()
        logger.info("Session cleared")

    def _require_session(self):
        if self._session is None:
            raise NotAuthenticatedError("No account is logged in")
        return self._session

    def update_account(self, partial_fields):
        """
        Merge username/mobile into the session account and its stored entry.

        Nothing changes unless the whole update is valid and the mobile is
        free among all other accounts.
        """
        session = self._require_session()
        changes = {key: partial_fields[key] for key in EDITABLE_ACCOUNT_FIELDS if key in partial_fields}

        result = validate_account_input(changes)
        if not result.ok:
            raise ValidationError(result.errors)

        account_id = session.account.id
        if 'mobile' in changes:
            taken = self._find(
                lambda account: account.mobile == changes['mobile'] and account.id != account_id
            )
            if taken:
                raise DuplicateAccountError(changes['mobile'])

        session.account = session.account.copy(**changes)
        for index, account in enumerate(self._accounts):
            if account.id == account_id:
                self._accounts[index] = account.copy(**changes)
        self._persist()
        logger.info("Updated account %s: %s", account_id, ', '.join(sorted(changes)))
        return session.account.copy()

    def change_password(self, current_password, new_password):
        session = self._require_session()
        if not AuthSystem.verify_password(current_password, session.account.password):
            raise IncorrectCredentialError("Current password is incorrect")

        result = validate_account_input({'password': new_password})
        if not result.ok:
            raise ValidationError(result.errors)

        password_hash = AuthSystem.hash_password(new_password)
        account_id = session.account.id
        session.account = session.account.copy(password=password_hash)
        for index, account in enumerate(self._accounts):
            if account.id == account_id:
                self._accounts[index] = account.copy(password=password_hash)
        self._persist()
        logger.info("Password changed for account %s", account_id)

    def reset_password(self, mobile, new_password):
        """Set a new password for a registered mobile without the old one"""
        account = self.check_exists(mobile)
        if account is None:
            raise NotFoundError(f"Mobile number {mobile} is not registered")

        result = validate_account_input({'password': new_password})
        if not result.ok:
            raise ValidationError(result.errors)

        account.password = AuthSystem.hash_password(new_password)
        if self._session and self._session.account.id == account.id:
            self._session.account = self._session.account.copy(password=account.password)
        self._persist()
        logger.info("Password reset for account %s", account.id)
