"""Response Envelope — the {code, message, data} shape every endpoint returns."""

from typing import Any, Generic, TypeVar

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class StandardResponse(BaseModel, Generic[T]):
    code: int
    message: str
    data: T | None = None


def respond(
    data: Any = None,
    message: str = "Success",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Wrap `data` in the envelope with `code` equal to the HTTP status."""
    body = StandardResponse(code=status_code, message=message, data=data)
    return JSONResponse(
        status_code=status_code, content=jsonable_encoder(body),
    )
