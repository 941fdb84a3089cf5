"""
Unit tests for the maintenance CLI
"""
from contextlib import contextmanager

import pytest

from storefront import cli
from storefront.database.models import User, UserRole


@pytest.fixture
def cli_db(db_session, monkeypatch):
    """Route CLI sessions to the test database"""

    @contextmanager
    def test_db_context():
        yield db_session
        db_session.commit()

    monkeypatch.setattr("storefront.database.connection.get_db_context", test_db_context)
    return db_session


class TestCLI:

    def test_create_admin(self, cli_db, capsys):
        code = cli.main(["create-user", "Root@Example.com", "Adm1nPassword", "--role", "admin"])

        assert code == 0
        user = cli_db.query(User).filter(User.email == "root@example.com").one()
        assert user.role == UserRole.ADMIN
        assert "Created admin" in capsys.readouterr().out

    def test_create_duplicate_user(self, cli_db, buyer):
        assert cli.main(["create-user", "buyer@example.com", "Passw0rd123"]) == 1

    def test_create_user_with_weak_password(self, cli_db):
        assert cli.main(["create-user", "new@example.com", "weak"]) == 1
        assert cli_db.query(User).count() == 0

    def test_drop_db_requires_confirmation(self, capsys):
        assert cli.main(["drop-db"]) == 1
        assert "--yes" in capsys.readouterr().out

    def test_unknown_role_rejected(self):
        with pytest.raises(SystemExit):
            cli.main(["create-user", "x@example.com", "Passw0rd123", "--role", "owner"])
