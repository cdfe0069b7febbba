from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from shortener_app.schemas.url import ErrorResponse
from shortener_app.services.url_service import URLService
from shortener_app.dependencies import get_url_service

router = APIRouter(tags=["redirect"])


@router.get(
    "/{short_code}",
    responses={404: {"model": ErrorResponse}},
)
def redirect_to_long_url(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    Unknown codes raise ShortCodeNotFoundError, which the app turns
    into a 404 error payload.
    """
    long_url = url_service.resolve(short_code)
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
