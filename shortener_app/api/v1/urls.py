from fastapi import APIRouter, Depends
from shortener_app.exceptions import InvalidURLError
from shortener_app.schemas.url import URLRequest, EncodeResponse, DecodeResponse, ErrorResponse
from shortener_app.services.url_service import URLService
from shortener_app.dependencies import get_url_service

router = APIRouter(tags=["urls"])


@router.post(
    "/encode",
    response_model=EncodeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def encode_url(
    body: URLRequest,
    url_service: URLService = Depends(get_url_service)
):
    """Shorten a long URL (returns the existing short URL if already stored)"""
    if not body.url:
        raise InvalidURLError(message="URL is required")
    return EncodeResponse(short_url=url_service.encode(body.url))


@router.post(
    "/decode",
    response_model=DecodeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def decode_url(
    body: URLRequest,
    url_service: URLService = Depends(get_url_service)
):
    """Resolve a short URL to the original long URL"""
    if not body.url:
        raise InvalidURLError(message="Short URL is required")
    return DecodeResponse(long_url=url_service.decode(body.url))
