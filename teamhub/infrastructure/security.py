"""JWT helpers used to identify the caller of the notification API."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from teamhub.config import Settings

# ---- JWT ----
# Los tokens los emite otro servicio; aquí solo se validan con SECRET_KEY.
ALGORITHM = "HS256"


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
