"""
Tests for authentication, tokens and e-mail delivery
"""
import re
import smtplib
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from jose import jwt

from application.services.auth.impl import AuthService
from core.exceptions import (
    AuthenticationException,
    DuplicateResourceException,
    ValidationException,
)
from domain.enums import UserType
from domain.value_objects import Email
from infrastructure.external.email_service import SmtpEmailService
from infrastructure.security.jwt_service import JwtService
from infrastructure.security.password_hasher import BcryptPasswordHasher
from fakes import InMemoryUserRepository, make_user


SECRET = "unit-test-secret"


@pytest.fixture
def users():
    return InMemoryUserRepository()


@pytest.fixture
def jwt_service():
    return JwtService(secret_key=SECRET, algorithm="HS256", expire_minutes=5)


@pytest.fixture
def auth_service(users, jwt_service):
    return AuthService(users, BcryptPasswordHasher(rounds=4), jwt_service)


class TestPasswordHasher:
    def test_hash_and_verify(self):
        hasher = BcryptPasswordHasher(rounds=4)
        hashed = hasher.hash_password("s3cret!")

        assert hashed != "s3cret!"
        assert hasher.verify_password("s3cret!", hashed)
        assert not hasher.verify_password("wrong", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not BcryptPasswordHasher(rounds=4).verify_password("s3cret!", "not-a-bcrypt-hash")


class TestJwtService:
    def test_token_claims(self, jwt_service):
        user_id = uuid4()

        claims = jwt_service.verify_token(jwt_service.create_access_token(user_id, "employer"))

        assert claims["sub"] == str(user_id)
        assert claims["role"] == "employer"
        assert claims["type"] == "access"
        assert claims["exp"] - claims["iat"] == 300

    def test_tampered_token_is_rejected(self, jwt_service):
        token = jwt_service.create_access_token(uuid4(), "job_seeker")
        forged = jwt.encode(jwt.get_unverified_claims(token), "another-secret", algorithm="HS256")

        with pytest.raises(AuthenticationException):
            jwt_service.verify_token(forged)

    def test_expired_token_is_rejected(self):
        expired = JwtService(secret_key=SECRET, algorithm="HS256", expire_minutes=-1)

        with pytest.raises(AuthenticationException):
            expired.verify_token(expired.create_access_token(uuid4(), "job_seeker"))


class TestRegisterAndLogin:
    @pytest.mark.asyncio
    async def test_register_returns_user_and_token(self, auth_service, jwt_service):
        user, token = await auth_service.register("  Dana@Example.com ", "s3cret!", "Dana", "Levi", UserType.EMPLOYER)

        assert str(user.email) == "dana@example.com"
        assert user.password_hash != "s3cret!"
        assert user.user_type == UserType.EMPLOYER
        assert jwt_service.verify_token(token)["sub"] == str(user.id)

    @pytest.mark.asyncio
    async def test_duplicate_email(self, auth_service):
        await auth_service.register("dana@example.com", "s3cret!", "Dana", "Levi")

        with pytest.raises(DuplicateResourceException):
            await auth_service.register("DANA@example.com", "other-pass", "Dana", "Cohen")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email, password, first_name",
        [
            ("not-an-email", "s3cret!", "Dana"),
            ("dana@example.com", "short", "Dana"),
            ("dana@example.com", "s3cret!", "   "),
        ],
    )
    async def test_invalid_registration(self, auth_service, users, email, password, first_name):
        with pytest.raises(ValidationException):
            await auth_service.register(email, password, first_name, "Levi")
        assert users.users == {}

    @pytest.mark.asyncio
    async def test_login(self, auth_service):
        registered, _ = await auth_service.register("dana@example.com", "s3cret!", "Dana", "Levi")

        user, token = await auth_service.login("Dana@Example.com", "s3cret!")

        assert user.id == registered.id
        assert (await auth_service.verify_access_token(token)).id == registered.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email, password", [("dana@example.com", "wrong-pass"), ("nobody@example.com", "s3cret!")])
    async def test_bad_credentials(self, auth_service, email, password):
        await auth_service.register("dana@example.com", "s3cret!", "Dana", "Levi")

        with pytest.raises(AuthenticationException, match="Invalid email or password"):
            await auth_service.login(email, password)

    @pytest.mark.asyncio
    async def test_token_of_deleted_user_resolves_to_none(self, auth_service, users):
        user, token = await auth_service.register("dana@example.com", "s3cret!", "Dana", "Levi")
        await users.delete(user.id)

        assert await auth_service.verify_access_token(token) is None


class TestProfile:
    @pytest.mark.asyncio
    async def test_change_password(self, auth_service):
        user, _ = await auth_service.register("dana@example.com", "s3cret!", "Dana", "Levi")

        with pytest.raises(AuthenticationException):
            await auth_service.change_password(user.id, "wrong-pass", "n3w-secret")

        await auth_service.change_password(user.id, "s3cret!", "n3w-secret")

        await auth_service.login("dana@example.com", "n3w-secret")
        with pytest.raises(AuthenticationException):
            await auth_service.login("dana@example.com", "s3cret!")

    @pytest.mark.asyncio
    async def test_new_password_too_short(self, auth_service):
        user, _ = await auth_service.register("dana@example.com", "s3cret!", "Dana", "Levi")

        with pytest.raises(ValidationException):
            await auth_service.change_password(user.id, "s3cret!", "abc")

    @pytest.mark.asyncio
    async def test_update_profile_ignores_protected_fields(self, auth_service):
        user, _ = await auth_service.register("dana@example.com", "s3cret!", "Dana", "Levi")

        updated = await auth_service.update_profile(
            user.id, {"bio": "Backend developer", "skills": ["python"], "user_type": UserType.ADMIN}
        )

        assert updated.bio == "Backend developer"
        assert updated.skills == ["python"]
        assert updated.user_type == UserType.JOB_SEEKER


@pytest.fixture
def mailing_auth(users, jwt_service, email_service):
    return AuthService(
        users, BcryptPasswordHasher(rounds=4), jwt_service, email_service, client_url="http://app.test/"
    )


def link_token(email_service, path):
    """Token from the link in the last e-mail sent"""
    _, _, body = email_service.send.await_args.args
    return re.search(rf"http://app\.test/{path}/([^\"]+)", body).group(1)


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_reset_with_emailed_link(self, mailing_auth, email_service):
        await mailing_auth.register("dana@example.com", "s3cret!", "Dana", "Levi")

        await mailing_auth.request_password_reset("Dana@Example.com")

        assert email_service.send.await_args.args[0] == "dana@example.com"
        token = link_token(email_service, "reset-password")
        await mailing_auth.reset_password(token, "n3w-secret")
        await mailing_auth.login("dana@example.com", "n3w-secret")
        with pytest.raises(AuthenticationException):
            await mailing_auth.login("dana@example.com", "s3cret!")

    @pytest.mark.asyncio
    async def test_token_works_once(self, mailing_auth, email_service):
        await mailing_auth.register("dana@example.com", "s3cret!", "Dana", "Levi")
        await mailing_auth.request_password_reset("dana@example.com")
        token = link_token(email_service, "reset-password")
        await mailing_auth.reset_password(token, "n3w-secret")

        with pytest.raises(ValidationException, match="Invalid or expired reset token"):
            await mailing_auth.reset_password(token, "an0ther-secret")
        await mailing_auth.login("dana@example.com", "n3w-secret")

    @pytest.mark.asyncio
    async def test_unknown_email_is_silent(self, mailing_auth, email_service):
        await mailing_auth.request_password_reset("nobody@example.com")

        email_service.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_tokens_are_rejected(self, mailing_auth, email_service):
        _, access_token = await mailing_auth.register("dana@example.com", "s3cret!", "Dana", "Levi")
        verification_token = link_token(email_service, "verify-email")

        for token in (access_token, verification_token, "garbage"):
            with pytest.raises(ValidationException):
                await mailing_auth.reset_password(token, "n3w-secret")

    @pytest.mark.asyncio
    async def test_new_password_too_short(self, mailing_auth, email_service):
        await mailing_auth.register("dana@example.com", "s3cret!", "Dana", "Levi")
        await mailing_auth.request_password_reset("dana@example.com")

        with pytest.raises(ValidationException):
            await mailing_auth.reset_password(link_token(email_service, "reset-password"), "abc")


class TestEmailVerification:
    @pytest.mark.asyncio
    async def test_register_sends_link_and_verify_logs_in(self, mailing_auth, email_service):
        registered, _ = await mailing_auth.register("dana@example.com", "s3cret!", "Dana", "Levi")
        assert not registered.is_email_verified
        token = link_token(email_service, "verify-email")

        user, access_token = await mailing_auth.verify_email(token)

        assert user.is_email_verified
        assert user.email_verified_at is not None
        assert (await mailing_auth.verify_access_token(access_token)).id == registered.id
        assert email_service.send.await_args.args[1] == "Welcome to the job board"
        with pytest.raises(ValidationException, match="Invalid or expired verification token"):
            await mailing_auth.verify_email(token)

    @pytest.mark.asyncio
    async def test_resend(self, mailing_auth, email_service):
        await mailing_auth.register("dana@example.com", "s3cret!", "Dana", "Levi")
        email_service.send.reset_mock()

        await mailing_auth.resend_verification("dana@example.com")
        await mailing_auth.resend_verification("nobody@example.com")

        assert email_service.send.await_count == 1
        await mailing_auth.verify_email(link_token(email_service, "verify-email"))
        with pytest.raises(ValidationException, match="already verified"):
            await mailing_auth.resend_verification("dana@example.com")

    @pytest.mark.asyncio
    async def test_login_can_require_verification(self, users, jwt_service, email_service):
        strict = AuthService(
            users,
            BcryptPasswordHasher(rounds=4),
            jwt_service,
            email_service,
            require_email_verification=True,
            client_url="http://app.test",
        )
        await strict.register("dana@example.com", "s3cret!", "Dana", "Levi")

        with pytest.raises(AuthenticationException, match="verify your email"):
            await strict.login("dana@example.com", "s3cret!")

        await strict.verify_email(link_token(email_service, "verify-email"))
        await strict.login("dana@example.com", "s3cret!")

    @pytest.mark.asyncio
    async def test_mail_failure_does_not_block_registration(self, mailing_auth, users, email_service):
        email_service.send.side_effect = RuntimeError("smtp down")

        user, _ = await mailing_auth.register("dana@example.com", "s3cret!", "Dana", "Levi")

        assert user.id in users.users


class TestAccountAdministration:
    @pytest.mark.asyncio
    async def test_delete_account(self, auth_service, users):
        user, token = await auth_service.register("dana@example.com", "s3cret!", "Dana", "Levi")

        await auth_service.delete_account(user.id)

        stored = users.users[user.id]
        assert stored.is_deleted
        assert not stored.is_active
        assert await auth_service.verify_access_token(token) is None
        with pytest.raises(AuthenticationException, match="Invalid email or password"):
            await auth_service.login("dana@example.com", "s3cret!")

    @pytest.mark.asyncio
    async def test_ensure_admin_is_idempotent(self, auth_service, users):
        admin = await auth_service.ensure_admin("Admin@Example.com", "adm1n-pass")
        again = await auth_service.ensure_admin("admin@example.com", "ignored")

        assert again.id == admin.id
        assert admin.user_type == UserType.ADMIN
        assert admin.is_email_verified
        assert len(users.users) == 1
        await auth_service.login("admin@example.com", "adm1n-pass")

    @pytest.mark.asyncio
    async def test_ensure_admin_will_not_promote_existing_user(self, auth_service, users):
        seeker = await users.create(make_user(email=Email("taken@example.com")))

        with pytest.raises(DuplicateResourceException):
            await auth_service.ensure_admin("taken@example.com", "adm1n-pass")
        assert users.users[seeker.id].user_type == UserType.JOB_SEEKER

class TestSmtpEmailService:
    @pytest.mark.asyncio
    async def test_disabled_without_host(self):
        service = SmtpEmailService(host="")

        assert not service.enabled
        assert await service.send("dana@example.com", "Hi", "<p>Hi</p>") is False

    @pytest.mark.asyncio
    async def test_retries_with_backoff(self):
        service = SmtpEmailService(host="smtp.example.com", max_retries=3, base_delay=1.0)
        failure = smtplib.SMTPServerDisconnected("gone")

        with patch.object(service, "_deliver", side_effect=[failure, failure, None]) as deliver, \
                patch("infrastructure.external.email_service.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await service.send("dana@example.com", "Hi", "<p>Hi</p>") is True

        assert deliver.call_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_last_attempt(self):
        service = SmtpEmailService(host="smtp.example.com", max_retries=2, base_delay=0)

        with patch.object(service, "_deliver", side_effect=ConnectionRefusedError()) as deliver, \
                patch("infrastructure.external.email_service.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(ConnectionRefusedError):
                await service.send("dana@example.com", "Hi", "<p>Hi</p>")

        assert deliver.call_count == 2

    def test_message_is_html(self):
        service = SmtpEmailService(host="smtp.example.com", sender="noreply@example.com")

        message = service._build_message("dana@example.com", "Welcome", "<p>Hello</p>")

        assert message["To"] == "dana@example.com"
        assert message["From"] == "noreply@example.com"
        assert message.get_payload()[0].get_content_subtype() == "html"
