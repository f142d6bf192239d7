import pytest

from auth.store import AccountStore
from errors import (
    DuplicateAccountError,
    IncorrectCredentialError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationError,
)


class TestRegisterAccount:
    def test_register_assigns_defaults(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        assert account.id
        assert account.created_at
        assert account.role == "user"
        assert account.mobile == "9123456789"
        assert account.username == "asha"
        assert account_store.check_exists("9123456789") == account

    def test_password_is_not_stored_in_plaintext(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        assert account.password != "TestPass123!"
        assert account.password.startswith("pbkdf2_sha256$")

    def test_duplicate_mobile_is_rejected(self, account_store, signup_fields):
        account_store.register_account(signup_fields)
        with pytest.raises(DuplicateAccountError):
            account_store.register_account({**signup_fields, "username": "other"})
        assert len(account_store.accounts) == 1

    def test_mobiles_stay_unique_over_many_registrations(self, account_store, signup_fields):
        mobiles = ["9000000001", "9000000002", "9000000001", "9000000003", "9000000002"]
        for mobile in mobiles:
            try:
                account_store.register_account({**signup_fields, "mobile": mobile})
            except DuplicateAccountError:
                pass
        stored = [account.mobile for account in account_store.accounts]
        assert sorted(stored) == ["9000000001", "9000000002", "9000000003"]

    def test_invalid_input_raises_with_every_field(self, account_store):
        with pytest.raises(ValidationError) as exc:
            account_store.register_account({
                "mobile": "12345",
                "username": "ab",
                "password": "weak",
            })
        assert set(exc.value.errors) == {"mobile", "username", "password"}
        assert account_store.accounts == []

    @pytest.mark.parametrize("missing, message", [
        ("password", "Password is required"),
        ("mobile", "Mobile number is required"),
        ("username", "Username is required"),
    ])
    def test_missing_field_is_a_validation_error(self, account_store, signup_fields, missing, message):
        del signup_fields[missing]
        with pytest.raises(ValidationError) as exc:
            account_store.register_account(signup_fields)
        assert exc.value.errors[missing] == message
        assert account_store.accounts == []

    def test_confirm_password_is_optional(self, account_store, signup_fields):
        del signup_fields["confirm_password"]
        assert account_store.register_account(signup_fields).username == "asha"

    def test_check_exists_is_exact(self, account_store, signup_fields):
        account_store.register_account(signup_fields)
        assert account_store.check_exists("9123456788") is None
        assert account_store.check_exists(" 9123456789") is None


class TestAuthenticate:
    def test_exact_match(self, account_store, signup_fields):
        registered = account_store.register_account(signup_fields)
        assert account_store.authenticate("9123456789", "TestPass123!") == registered

    @pytest.mark.parametrize("mobile, password", [
        ("9123456780", "TestPass123!"),
        ("9123456789", "TestPass123?"),
        ("9123456789", "testPass123!"),
        ("9123456789", "TestPass123"),
        ("9123456789", ""),
    ])
    def test_any_mismatch_returns_none(self, account_store, signup_fields, mobile, password):
        account_store.register_account(signup_fields)
        assert account_store.authenticate(mobile, password) is None


class TestSession:
    def test_login_and_logout(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        assert not account_store.is_authenticated

        session = account_store.login(account, token="token-1")
        assert account_store.is_authenticated
        assert account_store.role == "user"
        assert session.token == "token-1"
        assert account_store.current_account.id == account.id

        account_store.logout()
        assert not account_store.is_authenticated
        assert account_store.session is None
        assert account_store.role is None

    def test_login_replaces_prior_session(self, account_store, signup_fields):
        first = account_store.register_account(signup_fields)
        second = account_store.register_account({**signup_fields, "mobile": "9000000009"})
        account_store.login(first)
        account_store.login(second, token="token-2")
        assert account_store.current_account.id == second.id
        assert account_store.session.token == "token-2"

    def test_login_mints_token(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        session = account_store.login(account)
        assert session.token.startswith("session-")

    def test_new_browser_starts_logged_out(self, storage, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account, token="token-1")

        other_browser = AccountStore(storage, restore_session=False)
        assert not other_browser.is_authenticated
        assert other_browser.current_account is None
        assert other_browser.accounts == account_store.accounts
        assert other_browser.authenticate("9123456789", "TestPass123!") == account
        assert account_store.is_authenticated

    def test_reload_keeps_own_session_when_not_restoring(self, storage, signup_fields):
        browser = AccountStore(storage, restore_session=False)
        account = browser.register_account(signup_fields)
        browser.login(account, token="token-1")

        browser.reload()

        assert browser.session.token == "token-1"

    def test_restored_session(self, storage, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account, token="token-1")

        reloaded = AccountStore(storage)
        assert reloaded.session.token == "token-1"
        assert reloaded.current_account == account

    def test_admin_flag_follows_role(self, account_store, signup_fields):
        user = account_store.register_account(signup_fields)
        admin = account_store.register_account({**signup_fields, "mobile": "9000000009"}, role="admin")
        assert user.is_admin is False
        assert admin.is_admin is True
        account_store.login(admin)
        assert account_store.current_account.is_admin is True


class TestUpdateAccount:
    def test_requires_session(self, account_store):
        with pytest.raises(NotAuthenticatedError):
            account_store.update_account({"username": "newname"})

    def test_updates_both_copies(self, storage, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account)

        updated = account_store.update_account({"username": "asha_k", "mobile": "9000000005"})

        assert updated.username == "asha_k"
        assert account_store.current_account.mobile == "9000000005"
        stored = account_store.check_exists("9000000005")
        assert stored.id == account.id
        assert stored.username == "asha_k"
        assert account_store.check_exists("9123456789") is None
        assert AccountStore(storage).check_exists("9000000005").username == "asha_k"

    def test_keeping_own_mobile_is_allowed(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account)
        updated = account_store.update_account({"username": "renamed", "mobile": "9123456789"})
        assert updated.username == "renamed"

    def test_mobile_taken_by_other_account_rejects_whole_update(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.register_account({**signup_fields, "mobile": "9000000009"})
        account_store.login(account)

        with pytest.raises(DuplicateAccountError):
            account_store.update_account({"username": "renamed", "mobile": "9000000009"})

        assert account_store.current_account.username == "asha"
        assert account_store.current_account.mobile == "9123456789"
        assert account_store.check_exists("9123456789").username == "asha"

    def test_invalid_fields_are_rejected(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account)
        with pytest.raises(ValidationError) as exc:
            account_store.update_account({"username": "x", "mobile": "123"})
        assert set(exc.value.errors) == {"username", "mobile"}

    def test_role_and_id_are_not_editable(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account)
        updated = account_store.update_account({"role": "admin", "id": "forged", "username": "asha2"})
        assert updated.role == "user"
        assert updated.id == account.id


class TestChangePassword:
    def test_wrong_current_password(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account)
        with pytest.raises(IncorrectCredentialError):
            account_store.change_password("WrongPass123!", "NewPass456@")
        assert account_store.authenticate("9123456789", "TestPass123!") is not None

    def test_changes_both_copies(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account)

        account_store.change_password("TestPass123!", "NewPass456@")

        assert account_store.authenticate("9123456789", "TestPass123!") is None
        assert account_store.authenticate("9123456789", "NewPass456@") is not None
        assert account_store.current_account.password == account_store.check_exists("9123456789").password

    def test_weak_new_password(self, account_store, signup_fields):
        account = account_store.register_account(signup_fields)
        account_store.login(account)
        with pytest.raises(ValidationError):
            account_store.change_password("TestPass123!", "weak")


class TestResetPassword:
    def test_unknown_mobile(self, account_store):
        with pytest.raises(NotFoundError):
            account_store.reset_password("9000000000", "NewPass456@")

    def test_reset(self, account_store, signup_fields):
        account_store.register_account(signup_fields)
        account_store.reset_password("9123456789", "NewPass456@")
        assert account_store.authenticate("9123456789", "NewPass456@") is not None
        assert account_store.authenticate("9123456789", "TestPass123!") is None
