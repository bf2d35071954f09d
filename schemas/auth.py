from pydantic import BaseModel, ConfigDict, Field, SecretStr, AfterValidator
import re
from typing import Annotated

PASSWORD_REGEX = re.compile(
    r"^[A-Za-z0-9!@#$%^&*()_\-+=\[\]{};:'\",.<>/?|`~]+$"
)
NAME_REGEX = re.compile(r"^[A-Za-z0-9_.\-]+$")

def validate_password(v: SecretStr) -> SecretStr:
    password = v.get_secret_value()

    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")

    if " " in password:
        raise ValueError("Password must not contain spaces")

    if not PASSWORD_REGEX.fullmatch(password):
        raise ValueError(
            "Password may contain only English letters, digits and special symbols"
        )

    return v


def validate_name(v: str) -> str:
    if not NAME_REGEX.fullmatch(v):
        raise ValueError("Name may contain only letters, digits, dots, dashes and underscores")
    return v


ValidatePassword = Annotated[SecretStr, AfterValidator(validate_password)]
ValidateName = Annotated[str, Field(min_length=3, max_length=50), AfterValidator(validate_name)]


class RegisterIn(BaseModel):
    name: ValidateName
    password: ValidatePassword


class LoginIn(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=128)


class TokenOut(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    role: str
