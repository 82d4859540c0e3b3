"""
State-machine tests for AuthService against SQLite and an in-memory Redis.
"""

from unittest.mock import patch

import pytest

from app.auth.services.auth_service import AuthService
from app.auth.stores import ChallengeStore, CredentialStore
from app.core.errors import (
    DeliveryFailed,
    DuplicateUser,
    InvalidCredentials,
    InvalidOTP,
    StoreUnavailable,
    UserNotFound,
    ValidationError,
)

KEY = "password-reset:a@x.com"


@pytest.fixture
def challenges(fake_redis):
    return ChallengeStore(fake_redis, ttl_seconds=900, key_prefix="password-reset:")


@pytest.fixture
def service(db, challenges, notifier):
    return AuthService(
        credentials=CredentialStore(db),
        challenges=challenges,
        notifier=notifier,
        password_min_length=3,
    )


@pytest.fixture
def registered(service):
    service.register("a@x.com", "pw1")
    return service


class TestRegisterAndLogin:
    def test_register_then_login(self, service):
        service.register("a@x.com", "pw1")
        service.login("a@x.com", "pw1")

    def test_duplicate_registration(self, registered):
        with pytest.raises(DuplicateUser):
            registered.register("a@x.com", "other")

    def test_login_unknown_user(self, service):
        with pytest.raises(UserNotFound):
            service.login("nobody@x.com", "pw1")

    def test_login_wrong_password(self, registered):
        with pytest.raises(InvalidCredentials):
            registered.login("a@x.com", "wrong")

    def test_password_is_not_stored_in_clear(self, registered):
        user = registered.credentials.get_by_email("a@x.com")
        assert user.password_hash != "pw1"

    def test_short_password_rejected(self, service):
        with pytest.raises(ValidationError):
            service.register("a@x.com", "pw")

    def test_overlong_password_rejected(self, service):
        with pytest.raises(ValidationError):
            service.register("a@x.com", "p" * 129)


class TestRequestPasswordReset:
    def test_unknown_user(self, service, notifier, fake_redis):
        with pytest.raises(UserNotFound):
            service.request_password_reset("nobody@x.com")
        assert notifier.sent == []
        assert fake_redis.get("password-reset:nobody@x.com") is None

    def test_stores_and_sends_otp(self, registered, notifier, fake_redis):
        registered.request_password_reset("a@x.com")

        otp = notifier.last_otp("a@x.com")
        assert otp is not None and len(otp) == 6 and otp.isdigit()
        assert fake_redis.get(KEY) == otp
        assert 895 <= fake_redis.ttl(KEY) <= 900

    def test_new_request_replaces_pending_otp(self, registered, notifier, fake_redis):
        with patch("app.auth.services.auth_service.generate_otp", side_effect=["111111", "222222"]):
            registered.request_password_reset("a@x.com")
            registered.request_password_reset("a@x.com")

        assert fake_redis.get(KEY) == "222222"
        with pytest.raises(InvalidOTP):
            registered.reset_password("a@x.com", "111111", "pw2")
        registered.reset_password("a@x.com", "222222", "pw2")

    def test_delivery_failure_keeps_challenge(self, registered, notifier, fake_redis):
        notifier.fail = True
        with patch("app.auth.services.auth_service.generate_otp", return_value="123456"):
            with pytest.raises(DeliveryFailed):
                registered.request_password_reset("a@x.com")

        assert fake_redis.get(KEY) == "123456"


class TestResetPassword:
    def _issue(self, service, notifier):
        service.request_password_reset("a@x.com")
        return notifier.last_otp("a@x.com")

    def test_successful_reset_changes_password(self, registered, notifier, fake_redis):
        otp = self._issue(registered, notifier)

        registered.reset_password("a@x.com", otp, "pw2")

        registered.login("a@x.com", "pw2")
        with pytest.raises(InvalidCredentials):
            registered.login("a@x.com", "pw1")
        assert fake_redis.get(KEY) is None

    def test_otp_cannot_be_replayed(self, registered, notifier):
        otp = self._issue(registered, notifier)
        registered.reset_password("a@x.com", otp, "pw2")

        with pytest.raises(InvalidOTP):
            registered.reset_password("a@x.com", otp, "pw3")
        registered.login("a@x.com", "pw2")

    def test_wrong_otp_keeps_challenge(self, registered, notifier, fake_redis):
        otp = self._issue(registered, notifier)
        wrong = "000000" if otp != "000000" else "999999"

        with pytest.raises(InvalidOTP):
            registered.reset_password("a@x.com", wrong, "pw2")

        assert fake_redis.get(KEY) == otp
        registered.reset_password("a@x.com", otp, "pw2")

    def test_expired_otp_rejected(self, registered, notifier, fake_redis):
        otp = self._issue(registered, notifier)
        fake_redis.expire_now(KEY)

        with pytest.raises(InvalidOTP):
            registered.reset_password("a@x.com", otp, "pw2")
        registered.login("a@x.com", "pw1")

    def test_no_prior_request_is_invalid_otp_for_known_user(self, registered):
        with pytest.raises(InvalidOTP):
            registered.reset_password("a@x.com", "123456", "pw2")

    def test_no_prior_request_is_invalid_otp_for_unknown_user(self, service):
        with pytest.raises(InvalidOTP):
            service.reset_password("nobody@x.com", "123456", "pw2")

    def test_challenge_for_missing_user(self, service, challenges):
        challenges.upsert("ghost@x.com", "123456")
        with pytest.raises(UserNotFound):
            service.reset_password("ghost@x.com", "123456", "pw2")

    def test_concurrently_consumed_otp_rejected(self, registered, notifier, challenges):
        otp = self._issue(registered, notifier)

        with patch.object(challenges, "consume", return_value=False):
            with pytest.raises(InvalidOTP):
                registered.reset_password("a@x.com", otp, "pw2")
        registered.login("a@x.com", "pw1")

    def test_challenge_deleted_before_password_write(self, registered, notifier, fake_redis):
        otp = self._issue(registered, notifier)

        with patch.object(
            registered.credentials, "update_password_hash", side_effect=StoreUnavailable()
        ):
            with pytest.raises(StoreUnavailable):
                registered.reset_password("a@x.com", otp, "pw2")

        # Old password still valid, and the OTP is spent
        assert fake_redis.get(KEY) is None
        registered.login("a@x.com", "pw1")
        with pytest.raises(InvalidOTP):
            registered.reset_password("a@x.com", otp, "pw2")

    def test_short_new_password_rejected_before_consuming(self, registered, notifier, fake_redis):
        otp = self._issue(registered, notifier)
        with pytest.raises(ValidationError):
            registered.reset_password("a@x.com", otp, "p")
        assert fake_redis.get(KEY) == otp
