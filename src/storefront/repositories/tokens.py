from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update, delete
from sqlalchemy.orm import Session

from storefront.database.models import RefreshToken


class RefreshTokenRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, token: RefreshToken) -> RefreshToken:
        self.db.add(token)
        self.db.flush()
        return token

    def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        return self.db.query(RefreshToken).filter(RefreshToken.token_hash == token_hash).first()

    def revoke(self, token_id: UUID) -> bool:
        """
        Revoke a token only if it is still active.

        Returns False when another request already revoked it, which is how
        concurrent reuse of one refresh token is detected.
        """
        result = self.db.execute(
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True, revoked_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def revoke_all_for_user(self, user_id: UUID) -> int:
        result = self.db.execute(
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True, revoked_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def purge_expired(self, before: datetime) -> int:
        result = self.db.execute(
            delete(RefreshToken)
            .where(RefreshToken.expires_at < before)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
