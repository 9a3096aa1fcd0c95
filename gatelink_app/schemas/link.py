from pydantic import BaseModel, Field, ConfigDict, computed_field
from typing import Any, Optional
from datetime import datetime
from gatelink_app.config import settings

# Wire names are camelCase (originalUrl, shortId, ...). Every schema sets
# populate_by_name so services can build them with snake_case keywords.


class ShortenRequest(BaseModel):
    # Left as Any so that a missing or non-string value reaches the service
    # and is reported as {"error": "Invalid URL"} instead of a 422
    original_url: Any = Field(None, alias="originalUrl", description="Destination URL to shorten")

    model_config = ConfigDict(populate_by_name=True)


class ShortenResponse(BaseModel):
    short_id: str = Field(..., alias="shortId")

    @computed_field(alias="shortUrl")
    @property
    def short_url(self) -> str:
        """Computed field - shareable URL built from the configured base URL"""
        return f"{settings.base_url}/{self.short_id}"

    model_config = ConfigDict(populate_by_name=True)


class VerifyRequest(BaseModel):
    captcha_token: Optional[str] = Field(None, alias="captchaToken")

    model_config = ConfigDict(populate_by_name=True)


class VerifyResponse(BaseModel):
    success: bool = True
    redirect_url: str = Field(..., alias="redirectUrl")

    model_config = ConfigDict(populate_by_name=True)


class LinkStats(BaseModel):
    short_id: str = Field(..., alias="shortId")
    clicks: int
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    error: str
