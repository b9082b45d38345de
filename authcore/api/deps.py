from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from authcore.core.security import PasswordHasher, TokenIssuer
from authcore.db.models.user import User
from authcore.errors import InvalidTokenError
from authcore.repositories.user import UserRepository
from authcore.services.auth import AuthService, Notifier

bearer_scheme = HTTPBearer(auto_error=False)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_auth_service(
    request: Request,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
    notifier: Notifier = Depends(get_notifier),
) -> AuthService:
    return AuthService(
        users=UserRepository(db),
        hasher=hasher,
        tokens=tokens,
        notifier=notifier,
        session_token_ttl=request.app.state.session_token_ttl,
        reset_token_ttl=request.app.state.reset_token_ttl,
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    service: AuthService = Depends(get_auth_service),
) -> User:
    """Get the current authenticated user from a session token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return service.get_current_user(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
