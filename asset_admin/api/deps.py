# File: asset_admin/api/deps.py
"""
FastAPI dependencies for the asset admin API.

Provides dependency functions for database sessions, user authentication and
authorization, and service injection for API routes.
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from asset_admin.core import security
from asset_admin.core.config import settings
from asset_admin.db.models import User
from asset_admin.db.session import get_db
from asset_admin.repositories import UserRepository
from asset_admin.schemas.token import TokenPayload
from asset_admin.services.asset_import_service import AssetImportService
from asset_admin.services.label_printer import LabelPrinter
from asset_admin.services.label_service import LabelService
from asset_admin.services.label_settings_service import LabelSettingsService
from asset_admin.services.workbook_service import WorkbookService

logger = logging.getLogger(__name__)

# --- Authentication ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token")


def get_current_user(
        db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)
) -> User:
    """Resolve the bearer token to a stored user, or fail with 401."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        claims = TokenPayload.model_validate(security.decode_access_token(token))
        user_id = int(claims.sub)
    except (JWTError, ValidationError, ValueError) as e:
        logger.warning(f"Rejected access token: {e}")
        raise unauthorized from e

    user = UserRepository(session=db).get_by_id(user_id)
    if user is None:
        logger.warning(f"Access token refers to unknown user {user_id}")
        raise unauthorized
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        logger.warning(f"Inactive user {current_user.id} attempted access")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def get_current_active_superuser(current_user: User = Depends(get_current_active_user)) -> User:
    """Require an active superuser; import and export routes use this."""
    if not current_user.is_superuser:
        logger.warning(f"User {current_user.id} denied superuser-only route")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="The user doesn't have enough privileges",
        )
    return current_user


# --- Service Dependencies ---

def get_asset_import_service(db: Session = Depends(get_db)) -> AssetImportService:
    return AssetImportService(session=db)


def get_workbook_service(db: Session = Depends(get_db)) -> WorkbookService:
    return WorkbookService(session=db)


def get_label_printer() -> LabelPrinter:
    return LabelPrinter()


def get_label_service(
        db: Session = Depends(get_db),
        printer: LabelPrinter = Depends(get_label_printer),
) -> LabelService:
    return LabelService(session=db, printer=printer)


def get_label_settings_service(db: Session = Depends(get_db)) -> LabelSettingsService:
    return LabelSettingsService(session=db)
