"""Response envelope shared by every endpoint"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(data: Any, status_code: int = 200) -> JSONResponse:
    """Success body: {"data": ..., "error": null}"""
    return JSONResponse(
        status_code=status_code, content={"data": jsonable_encoder(data), "error": None}
    )


def error_response(message: str, status_code: int, headers: dict | None = None) -> JSONResponse:
    """Failure body: {"error": message}"""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)
