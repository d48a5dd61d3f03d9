"""
Tests for user registration and profile management
(dispobank.services.user_service).
"""

import uuid
from datetime import date

import pytest

from dispobank.models.account import Account
from dispobank.models.user import User
from dispobank.results import ErrorCode, Failure, Success
from dispobank.security import validate_password, verify_password
from dispobank.services import auth_service, user_service

# Password of the "user" fixture
PASSWORD = "SecurePassword123!"
VALID_PASSWORD = "BrandNewPassword1!"


def _birthdate_years_ago(years: int) -> str:
    today = date.today()
    return today.replace(year=today.year - years, day=min(today.day, 28)).strftime("%d.%m.%Y")


class TestCreateUser:

    async def test_create_user(self, db_session):
        result = await user_service.create_user(
            db_session, "Carol", "Nguyen", "21.07.1995", VALID_PASSWORD
        )
        assert isinstance(result, Success)

        view = (await user_service.find_user(db_session, result.value)).value
        assert view.first_name == "Carol"
        assert view.birthdate == "21.07.1995"
        assert view.accounts == []

    async def test_password_is_hashed(self, db_session):
        result = await user_service.create_user(
            db_session, "Carol", "Nguyen", "21.07.1995", VALID_PASSWORD
        )
        stored = await db_session.get(User, result.value)
        assert stored.hashed_password != VALID_PASSWORD
        assert verify_password(VALID_PASSWORD, stored.hashed_password)

    @pytest.mark.parametrize("birthdate", ["1995-07-21", "31.02.1990", "", "yesterday"])
    async def test_unparsable_birthdate(self, db_session, birthdate):
        result = await user_service.create_user(
            db_session, "Carol", "Nguyen", birthdate, VALID_PASSWORD
        )
        assert isinstance(result, Failure)
        assert result.error_code == ErrorCode.MAPPING_ERROR

    async def test_too_young(self, db_session):
        result = await user_service.create_user(
            db_session, "Carol", "Nguyen", _birthdate_years_ago(17), VALID_PASSWORD
        )
        assert result.error_code == ErrorCode.MAPPING_ERROR

    async def test_old_enough(self, db_session):
        result = await user_service.create_user(
            db_session, "Carol", "Nguyen", _birthdate_years_ago(19), VALID_PASSWORD
        )
        assert isinstance(result, Success)

    @pytest.mark.parametrize(
        "password",
        [
            "Short1!",                    # too short
            "alllowercasepassword1!",     # no uppercase
            "ALLUPPERCASEPASSWORD1!",     # no lowercase
            "NoDigitsInThisPassword!",    # no digit
            "NoSpecialCharacters123",     # no special character
            "Contains Space Password1!",  # character outside the allowed classes
        ],
    )
    async def test_password_rules(self, db_session, password):
        result = await user_service.create_user(
            db_session, "Carol", "Nguyen", "21.07.1995", password
        )
        assert result.error_code == ErrorCode.MAPPING_ERROR

    async def test_duplicate_id(self, db_session):
        user_id = uuid.uuid4()
        await user_service.create_user(
            db_session, "Carol", "Nguyen", "21.07.1995", VALID_PASSWORD, user_id=user_id
        )
        result = await user_service.create_user(
            db_session, "Dave", "Johnson", "01.01.1980", VALID_PASSWORD, user_id=user_id
        )
        assert result.error_code == ErrorCode.USER_ALREADY_EXIST


class TestProfile:

    async def test_find_user_includes_owned_accounts(self, db_session, user, make_account):
        account = await make_account(user, name="Checking")

        view = (await user_service.find_user(db_session, user.id)).value
        assert [a.account_id for a in view.accounts] == [account.id]

    async def test_find_unknown_user(self, db_session):
        result = await user_service.find_user(db_session, uuid.uuid4())
        assert result.error_code == ErrorCode.USER_NOT_FOUND

    async def test_update_user(self, db_session, user):
        result = await user_service.update_user(
            db_session, user.id, "Alicia", "Chen", "14.03.1988", VALID_PASSWORD
        )
        assert result == Success(user.id)

        view = (await user_service.find_user(db_session, user.id)).value
        assert view.first_name == "Alicia"
        assert view.birthdate == "14.03.1988"
        assert isinstance(await user_service.is_valid_user(db_session, user.id, VALID_PASSWORD), Success)

    async def test_update_with_invalid_password_changes_nothing(self, db_session, user):
        result = await user_service.update_user(
            db_session, user.id, "Alicia", "Chen", "14.03.1988", "weak"
        )
        assert result.error_code == ErrorCode.MAPPING_ERROR

        view = (await user_service.find_user(db_session, user.id)).value
        assert view.first_name == "Alice"

    async def test_delete_user_detaches_accounts(self, db_session, user, make_account):
        account = await make_account(user)

        result = await user_service.delete_user(db_session, user.id)
        assert result == Success(user.id)

        assert await db_session.get(User, user.id, populate_existing=True) is None
        stored = await db_session.get(Account, account.id, populate_existing=True)
        assert stored is not None
        assert stored.user_id is None


class TestPasswords:

    async def test_update_password(self, db_session, user):
        result = await user_service.update_password(db_session, user.id, PASSWORD, VALID_PASSWORD)
        assert result == Success(user.id)

        assert isinstance(await user_service.is_valid_user(db_session, user.id, VALID_PASSWORD), Success)
        old = await user_service.is_valid_user(db_session, user.id, PASSWORD)
        assert old.error_code == ErrorCode.PASSWORD_ERROR

    async def test_wrong_existing_password(self, db_session, user):
        result = await user_service.update_password(
            db_session, user.id, "WrongPassword123!", VALID_PASSWORD
        )
        assert result.error_code == ErrorCode.PASSWORD_ERROR

    async def test_new_password_must_differ(self, db_session, user):
        result = await user_service.update_password(db_session, user.id, PASSWORD, PASSWORD)
        assert result.error_code == ErrorCode.PASSWORD_ERROR

    async def test_new_password_must_follow_rules(self, db_session, user):
        result = await user_service.update_password(db_session, user.id, PASSWORD, "weak")
        assert result.error_code == ErrorCode.MAPPING_ERROR

    async def test_reset_password_returns_compliant_password(self, db_session, user):
        result = await user_service.reset_password(db_session, user.id)
        assert isinstance(result, Success)

        assert validate_password(result.value) == (True, "")
        assert isinstance(await user_service.is_valid_user(db_session, user.id, result.value), Success)

    async def test_list_users(self, db_session, user, other_user):
        result = await user_service.list_users(db_session)
        assert {view.user_id for view in result.value} == {user.id, other_user.id}


class TestCredentials:

    async def test_is_valid_user(self, db_session, user):
        assert await user_service.is_valid_user(db_session, user.id, PASSWORD) == Success(True)

    async def test_is_valid_user_unknown(self, db_session):
        result = await user_service.is_valid_user(db_session, uuid.uuid4(), PASSWORD)
        assert result.error_code == ErrorCode.USER_NOT_FOUND

    async def test_is_valid_administrator(self, db_session):
        created = await auth_service.create_administrator(db_session, "Ops", "AdminPassword789$")

        ok = await auth_service.is_valid_administrator(db_session, created.value, "AdminPassword789$")
        wrong = await auth_service.is_valid_administrator(db_session, created.value, "nope")
        unknown = await auth_service.is_valid_administrator(db_session, uuid.uuid4(), "nope")
        malformed = await auth_service.is_valid_administrator(db_session, "admin", "nope")

        assert ok == Success(True)
        assert wrong.error_code == ErrorCode.NOT_ALLOWED
        assert unknown.error_code == ErrorCode.ADMINISTRATOR_NOT_FOUND
        assert malformed.error_code == ErrorCode.MAPPING_ERROR
