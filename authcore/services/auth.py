"""Auth service: signup, login, password reset request and completion."""

import logging
from datetime import timedelta
from typing import Protocol

from fastapi.concurrency import run_in_threadpool

from authcore.core.security import (
    ACCESS_TOKEN,
    PASSWORD_RESET_TOKEN,
    PasswordHasher,
    TokenIssuer,
)
from authcore.db.models.user import User as UserModel
from authcore.domain.validators import is_valid_email, is_valid_phone_number
from authcore.errors import (
    DuplicateResourceError,
    InvalidEmailError,
    InvalidPhoneError,
    InvalidTokenError,
    MissingFieldError,
    NotFoundError,
    PasswordMismatchError,
    UnauthorizedError,
)
from authcore.repositories.user import UserRepository
from authcore.schemas.user import AuthResult, MessageResponse, UserPublic

logger = logging.getLogger(__name__)

SESSION_TOKEN_TTL = timedelta(hours=1)
RESET_TOKEN_TTL = timedelta(minutes=15)

INVALID_CREDENTIALS_MESSAGE = "Invalid Username or Password. Please try again."
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class Notifier(Protocol):
    async def send_password_reset_email(self, email: str, reset_token: str) -> None: ...


class AuthService:
    """
    Credential lifecycle for a single users table.

    Collaborators are passed in so that each request gets its own store
    session while the hasher, token issuer and notifier are shared
    process-wide.
    """

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        notifier: Notifier,
        session_token_ttl: timedelta = SESSION_TOKEN_TTL,
        reset_token_ttl: timedelta = RESET_TOKEN_TTL,
    ):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.notifier = notifier
        self.session_token_ttl = session_token_ttl
        self.reset_token_ttl = reset_token_ttl

    def _session_result(self, message: str, user: UserModel) -> AuthResult:
        token = self.tokens.issue(user.id, self.session_token_ttl, ACCESS_TOKEN)
        return AuthResult(message=message, user=UserPublic.model_validate(user), token=token)

    def signup(
        self,
        fullname: str | None,
        email: str | None,
        phone_number: str | None,
        password: str | None,
        confirm_password: str | None,
    ) -> AuthResult:
        """
        Register a new user and return a session token.

        Raises:
            MissingFieldError: If any field is empty or absent.
            InvalidEmailError / InvalidPhoneError: On malformed contact details.
            PasswordMismatchError: If the two passwords differ.
            DuplicateResourceError: If the email is already registered.
        """
        if not all([fullname, email, phone_number, password, confirm_password]):
            raise MissingFieldError("All fields are required")
        if not is_valid_email(email):
            raise InvalidEmailError("Invalid email format")
        if not is_valid_phone_number(phone_number):
            raise InvalidPhoneError("Invalid phone number format")
        if password != confirm_password:
            raise PasswordMismatchError("Passwords do not match")

        # Fast path only; the unique index decides under concurrency.
        if self.users.get_by_email(email) is not None:
            raise DuplicateResourceError("Email already registered")

        password_hash = self.hasher.hash(password)
        user = self.users.create(
            fullname=fullname,
            email=email,
            phone_number=phone_number,
            password_hash=password_hash,
        )
        logger.info("Registered user %s", user.id)
        return self._session_result("Registered successfully", user)

    def login(self, email: str | None, password: str | None) -> AuthResult:
        """
        Authenticate user by email and password, return a session token.

        Raises:
            InvalidEmailError: If email is malformed.
            UnauthorizedError: If email not found or password incorrect.
        """
        if not is_valid_email(email):
            raise InvalidEmailError("Invalid email format")

        user = self.users.get_by_email(email)
        if user is None:
            # same bcrypt cost as a wrong password, so timing does not reveal the account
            self.hasher.dummy_verify()
        if user is None or not self.hasher.verify(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        return self._session_result("Logged in successfully", user)

    async def request_password_reset(self, email: str | None) -> MessageResponse:
        """
        Issue a reset token, store it on the user and email the reset link.

        A new request replaces any outstanding token. If sending fails the
        token stays stored and NotificationError propagates.

        Raises:
            InvalidEmailError: If email is malformed.
            NotFoundError: If no user has this email.
            NotificationError: If the email could not be sent.
        """
        if not is_valid_email(email):
            raise InvalidEmailError("Invalid email format")

        # Store calls are blocking; keep them off the event loop
        user = await run_in_threadpool(self.users.get_by_email, email)
        if user is None:
            raise NotFoundError("User not found")

        reset_token = self.tokens.issue(user.id, self.reset_token_ttl, PASSWORD_RESET_TOKEN)
        if not await run_in_threadpool(self.users.set_reset_token, user.id, reset_token):
            raise NotFoundError("User not found")
        logger.info("Password reset requested for user %s", user.id)

        await self.notifier.send_password_reset_email(email, reset_token)
        return MessageResponse(message="Password reset link sent to your email")

    def complete_password_reset(
        self, token: str | None, new_password: str | None
    ) -> MessageResponse:
        """
        Set a new password using the token from the reset email.

        No session token is issued; the user logs in again afterwards.

        Raises:
            MissingFieldError: If the new password is empty.
            InvalidTokenError: If the token is invalid, expired, superseded or used.
        """
        user_id = self.tokens.verify(token, PASSWORD_RESET_TOKEN)
        if not new_password:
            raise MissingFieldError("New password is required")

        user = self.users.get_by_id(user_id)
        if user is None or user.reset_token != token:
            raise InvalidTokenError(INVALID_TOKEN_MESSAGE)

        password_hash = self.hasher.hash(new_password)
        if not self.users.reset_password(user.id, token, password_hash):
            # a concurrent reset or a newer request got there first
            raise InvalidTokenError(INVALID_TOKEN_MESSAGE)

        logger.info("Password reset completed for user %s", user.id)
        return MessageResponse(message="Password has been reset successfully")

    def get_current_user(self, token: str | None) -> UserModel:
        """Resolve a session token to its user."""
        user_id = self.tokens.verify(token, ACCESS_TOKEN)
        user = self.users.get_by_id(user_id)
        if user is None:
            raise InvalidTokenError(INVALID_TOKEN_MESSAGE)
        return user
