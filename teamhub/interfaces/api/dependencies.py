"""FastAPI dependency utilities."""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from teamhub.application.use_cases.notifications import NotificationService
from teamhub.application.use_cases.preferences import PreferenceService
from teamhub.bootstrap import NotificationSystem
from teamhub.config import Settings
from teamhub.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by a verified bearer token."""

    id: str
    role: str | None = None

    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def _credentials_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Credenciales inválidas",
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, settings: Settings) -> CurrentUser:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token, settings)
    except ValueError as exc:
        raise _credentials_error() from exc

    subject = payload.get("sub")
    if subject is None or subject == "":
        raise _credentials_error()
    role = payload.get("role")
    return CurrentUser(id=str(subject), role=str(role) if role is not None else None)


def get_notification_system(request: Request) -> NotificationSystem:
    """Return the notification system built during application startup."""

    system = getattr(request.app.state, "notifications", None)
    if system is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="El sistema de notificaciones no está disponible",
        )
    return system


def get_current_user(
    token: str = Depends(oauth2_scheme),
    system: NotificationSystem = Depends(get_notification_system),
) -> CurrentUser:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, system.settings)


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Ensure the authenticated user has administrator privileges."""

    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No autorizado",
        )
    return current_user


def get_notification_service(
    system: NotificationSystem = Depends(get_notification_system),
) -> NotificationService:
    return system.service


def get_preference_service(
    system: NotificationSystem = Depends(get_notification_system),
) -> PreferenceService:
    return system.preferences
