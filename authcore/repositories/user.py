import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from authcore.db.models.user import User as UserModel
from authcore.errors import DuplicateResourceError, StoreError

logger = logging.getLogger(__name__)


class UserRepository:
    """Data access for the users table. Pure data access - no business logic."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("User store failure during %s", operation)
            raise StoreError("User store is unavailable") from e

    def get_by_email(self, email: str) -> UserModel | None:
        """Get a user by exact email match."""
        with self._guard("get_by_email"):
            return self.db.query(UserModel).filter(UserModel.email == email).first()

    def get_by_id(self, user_id: int) -> UserModel | None:
        """Get a user by ID."""
        with self._guard("get_by_id"):
            return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def create(
        self,
        fullname: str,
        email: str,
        phone_number: str,
        password_hash: str,
    ) -> UserModel:
        """
        Insert a new user.

        The unique index on ``email`` is the real guard against concurrent
        signups; a violation surfaces here as DuplicateResourceError.
        """
        db_user = UserModel(
            fullname=fullname,
            email=email,
            phone_number=phone_number,
            password_hash=password_hash,
            reset_token=None,
        )
        try:
            self.db.add(db_user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateResourceError("Email already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("User store failure during create")
            raise StoreError("Failed to create user") from e

        with self._guard("create"):
            self.db.refresh(db_user)
        return db_user

    def set_reset_token(self, user_id: int, token: str) -> bool:
        """Store ``token`` as the only outstanding reset token for the user."""
        with self._guard("set_reset_token"):
            updated = (
                self.db.query(UserModel)
                .filter(UserModel.id == user_id)
                .update({UserModel.reset_token: token}, synchronize_session=False)
            )
            self.db.commit()
        return updated == 1

    def reset_password(self, user_id: int, token: str, password_hash: str) -> bool:
        """
        Replace the password hash and clear the reset token in one statement.

        Only matches while ``token`` is still the stored reset token, so a
        token is consumed at most once. Returns False when nothing matched.
        """
        with self._guard("reset_password"):
            updated = (
                self.db.query(UserModel)
                .filter(UserModel.id == user_id, UserModel.reset_token == token)
                .update(
                    {UserModel.password_hash: password_hash, UserModel.reset_token: None},
                    synchronize_session=False,
                )
            )
            self.db.commit()
        return updated == 1
