"""
Unit tests for AuthService and UserService
"""
from datetime import datetime, timedelta

import pytest

from storefront.auth import PasswordManager
from storefront.auth.jwt_manager import hash_token
from storefront.database.models import RefreshToken, UserRole
from storefront.utils.exceptions import Conflict, Unauthorized, ValidationError

PASSWORD = "Passw0rd123"


class TestRegister:

    def test_register_creates_user_with_hash(self, auth_service, db_session):
        profile = auth_service.register("New.User@Example.com", PASSWORD, "New User")

        assert profile.email == "new.user@example.com"
        assert profile.role == UserRole.BUYER
        assert profile.is_active is True

        user = auth_service.users.get(profile.id)
        assert user.password_hash != PASSWORD
        assert auth_service.passwords.verify(PASSWORD, user.password_hash)

    def test_register_seller(self, auth_service):
        profile = auth_service.register("shop@example.com", PASSWORD, role=UserRole.SELLER)

        assert profile.role == UserRole.SELLER

    def test_admin_cannot_self_register(self, auth_service):
        with pytest.raises(ValidationError):
            auth_service.register("root@example.com", PASSWORD, role=UserRole.ADMIN)

    def test_duplicate_email_conflict(self, auth_service, buyer):
        with pytest.raises(Conflict):
            auth_service.register("BUYER@example.com", PASSWORD)

    @pytest.mark.parametrize("email", ["not-an-email", "a@", "@example.com"])
    def test_malformed_email(self, auth_service, email):
        with pytest.raises(ValidationError):
            auth_service.register(email, PASSWORD)

    def test_weak_password(self, auth_service):
        with pytest.raises(ValidationError):
            auth_service.register("weak@example.com", "short")


class TestLogin:

    def test_login_issues_pair_and_persists_refresh_hash(self, auth_service, buyer):
        pair = auth_service.login("buyer@example.com", PASSWORD)

        assert pair.token_type == "bearer"
        assert pair.expires_in == auth_service.jwt.access_token_ttl_seconds

        stored = auth_service.tokens.get_by_hash(hash_token(pair.refresh_token))
        assert stored is not None
        assert stored.user_id == buyer.id
        assert stored.is_revoked is False
        assert stored.expires_at > datetime.utcnow()

    def test_wrong_password_issues_nothing(self, auth_service, db_session, buyer):
        with pytest.raises(Unauthorized):
            auth_service.login("buyer@example.com", "WrongPassw0rd")

        assert db_session.query(RefreshToken).count() == 0

    def test_unknown_email(self, auth_service):
        with pytest.raises(Unauthorized):
            auth_service.login("ghost@example.com", PASSWORD)

    def test_login_upgrades_outdated_hash(self, auth_service, db_session, buyer):
        buyer.password_hash = PasswordManager(rounds=5).hash(PASSWORD)
        db_session.commit()

        auth_service.login("buyer@example.com", PASSWORD)

        db_session.refresh(buyer)
        assert auth_service.passwords.needs_rehash(buyer.password_hash) is False
        assert auth_service.passwords.verify(PASSWORD, buyer.password_hash)

    def test_inactive_user_cannot_login(self, auth_service, db_session, buyer):
        buyer.is_active = False
        db_session.commit()

        with pytest.raises(Unauthorized):
            auth_service.login("buyer@example.com", PASSWORD)


class TestRefresh:

    def test_refresh_rotates_token(self, auth_service, buyer):
        pair = auth_service.login("buyer@example.com", PASSWORD)

        rotated = auth_service.refresh(pair.refresh_token)

        assert rotated.refresh_token != pair.refresh_token
        assert auth_service.tokens.get_by_hash(hash_token(pair.refresh_token)).is_revoked is True
        assert auth_service.authenticate(rotated.access_token).id == buyer.id

    def test_refresh_token_reuse_rejected(self, auth_service, buyer):
        pair = auth_service.login("buyer@example.com", PASSWORD)
        auth_service.refresh(pair.refresh_token)

        with pytest.raises(Unauthorized):
            auth_service.refresh(pair.refresh_token)

    def test_access_token_cannot_refresh(self, auth_service, buyer):
        pair = auth_service.login("buyer@example.com", PASSWORD)

        with pytest.raises(Unauthorized):
            auth_service.refresh(pair.access_token)

    def test_expired_refresh_token_rejected(self, auth_service, db_session, buyer):
        pair = auth_service.login("buyer@example.com", PASSWORD)
        stored = auth_service.tokens.get_by_hash(hash_token(pair.refresh_token))
        stored.expires_at = datetime.utcnow() - timedelta(seconds=1)
        db_session.commit()

        with pytest.raises(Unauthorized):
            auth_service.refresh(pair.refresh_token)

    def test_unpersisted_refresh_token_rejected(self, auth_service, buyer):
        token = auth_service.jwt.create_refresh_token(str(buyer.id)).token

        with pytest.raises(Unauthorized):
            auth_service.refresh(token)


class TestLogout:

    def test_logout_revokes_and_is_idempotent(self, auth_service, buyer):
        pair = auth_service.login("buyer@example.com", PASSWORD)

        assert auth_service.logout(pair.refresh_token, user_id=buyer.id) == 1
        assert auth_service.logout(pair.refresh_token, user_id=buyer.id) == 0
        assert auth_service.logout("unknown-token", user_id=buyer.id) == 0

        with pytest.raises(Unauthorized):
            auth_service.refresh(pair.refresh_token)

    def test_logout_ignores_foreign_token(self, auth_service, buyer, other_buyer):
        pair = auth_service.login("other@example.com", PASSWORD)

        assert auth_service.logout(pair.refresh_token, user_id=buyer.id) == 0
        assert auth_service.refresh(pair.refresh_token).access_token

    def test_logout_all_devices(self, auth_service, buyer):
        first = auth_service.login("buyer@example.com", PASSWORD)
        second = auth_service.login("buyer@example.com", PASSWORD)

        assert auth_service.logout(user_id=buyer.id, all_devices=True) == 2

        for pair in (first, second):
            with pytest.raises(Unauthorized):
                auth_service.refresh(pair.refresh_token)

    def test_logout_without_token(self, auth_service, buyer):
        with pytest.raises(ValidationError):
            auth_service.logout(user_id=buyer.id)


class TestAuthenticate:

    def test_garbage_token(self, auth_service):
        with pytest.raises(Unauthorized):
            auth_service.authenticate("not-a-jwt")

    def test_deactivated_user_token_rejected(self, auth_service, user_service, buyer):
        pair = auth_service.login("buyer@example.com", PASSWORD)

        user_service.deactivate(buyer)

        with pytest.raises(Unauthorized):
            auth_service.authenticate(pair.access_token)
        with pytest.raises(Unauthorized):
            auth_service.refresh(pair.refresh_token)


class TestUserService:

    def test_update_profile(self, user_service, buyer):
        profile = user_service.update_profile(buyer, "  Jamie Doe ")

        assert profile.full_name == "Jamie Doe"

    def test_change_password_revokes_sessions(self, auth_service, user_service, buyer):
        pair = auth_service.login("buyer@example.com", PASSWORD)

        user_service.change_password(buyer, PASSWORD, "NewPassw0rd9")

        with pytest.raises(Unauthorized):
            auth_service.refresh(pair.refresh_token)
        with pytest.raises(Unauthorized):
            auth_service.login("buyer@example.com", PASSWORD)
        assert auth_service.login("buyer@example.com", "NewPassw0rd9").access_token

    def test_change_password_requires_current(self, user_service, buyer):
        with pytest.raises(Unauthorized):
            user_service.change_password(buyer, "WrongPassw0rd", "NewPassw0rd9")

    def test_change_password_validates_new(self, user_service, buyer):
        with pytest.raises(ValidationError):
            user_service.change_password(buyer, PASSWORD, "weak")
