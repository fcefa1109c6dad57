# File: asset_admin/schemas/token.py

from typing import Optional
from pydantic import BaseModel, Field


class TokenPayload(BaseModel):
    """
    Schema for the contents of JWT token payload.
    """

    sub: str = Field(..., description="Subject identifier (user ID)")
    exp: int = Field(..., description="Token expiration timestamp")
    type: Optional[str] = Field(None, description="Token type")
