from pydantic import BaseModel, ConfigDict, Field

# Request fields are optional so that absent or empty values reach the
# service, which reports them as MISSING_FIELD / INVALID_EMAIL.


class SignupRequest(BaseModel):
    fullname: str | None = None
    email: str | None = None
    phone_number: str | None = None
    password: str | None = None
    confirm_password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str | None = None


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str | None = None
    new_password: str | None = Field(default=None, alias="newPassword")


class UserPublic(BaseModel):
    """Fields of a user that may leave the service."""

    model_config = ConfigDict(from_attributes=True)

    fullname: str
    email: str
    phone_number: str


class AuthResult(BaseModel):
    message: str
    user: UserPublic
    token: str


class MessageResponse(BaseModel):
    message: str
