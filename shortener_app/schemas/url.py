from pydantic import BaseModel, Field
from typing import Optional


class URLRequest(BaseModel):
    """Request body shared by /encode and /decode.

    `url` is a plain string: encode validates it itself and decode
    accepts bare short codes.
    """
    url: Optional[str] = Field(None, description="Long URL to shorten or short URL to resolve")


class EncodeResponse(BaseModel):
    short_url: str


class DecodeResponse(BaseModel):
    long_url: str


class ErrorResponse(BaseModel):
    error: str
