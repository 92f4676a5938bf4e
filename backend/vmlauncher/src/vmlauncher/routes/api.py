"""
API Routes

This module defines the FastAPI routes.
It validates incoming HTTP requests (method, content type, JSON body),
delegates the instance operation to the InstanceService in the threadpool,
and returns the result as a JSON response.
"""

import json
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from vmlauncher.config import Settings, get_settings
from vmlauncher.models.instance_models import ErrorResponse, InstanceOperationResponse
from vmlauncher.services.instance_service import InstanceService
from vmlauncher.utils.errors import InstanceOperationError

JSON_MEDIA_TYPE = "application/json"
NON_POST_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]
ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def get_service(settings: Settings = Depends(get_settings)) -> InstanceService:
    return InstanceService(settings)


def _bad_request(message: str) -> HTTPException:
    logger.warning(message)
    return HTTPException(status_code=400, detail={"error": message})


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a JSON object.

    Raises:
        HTTPException: 400 if the content type is not JSON, the body cannot be read,
            is not valid JSON or is not a JSON object.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";", 1)[0].strip().lower() != JSON_MEDIA_TYPE:
        raise _bad_request(f"Bad Content Type {content_type}")

    try:
        body = await request.body()
    except ClientDisconnect as e:
        raise _bad_request(f"Bad Post Content {e!r}") from e

    try:
        data = json.loads(body)
    except ValueError as e:
        raise _bad_request(f"Bad Post Content Parse {e}") from e

    if not isinstance(data, dict):
        raise _bad_request(f"Bad Post Content Parse expected a JSON object, got {type(data).__name__}")
    return data


router = APIRouter()

@router.get("/ping")
def ping():
    logger.info("Ping endpoint called")
    return {"message": "pong"}


@router.post("/launch", response_model=InstanceOperationResponse, responses=ERROR_RESPONSES)
async def launch_vm(
    data: Dict[str, Any] = Depends(read_json_body),
    svc: InstanceService = Depends(get_service),
):
    try:
        return await run_in_threadpool(svc.launch, data)
    except InstanceOperationError as e:
        logger.error(f"Launch VM Error {e}")
        raise HTTPException(status_code=500, detail={"error": str(e)})
    except Exception as e:
        logger.exception(f"Launch VM Error {e}")
        raise HTTPException(status_code=500, detail={"error": "Internal server error"})


@router.post("/kill", response_model=InstanceOperationResponse, responses=ERROR_RESPONSES)
async def kill_vm(
    data: Dict[str, Any] = Depends(read_json_body),
    svc: InstanceService = Depends(get_service),
):
    try:
        return await run_in_threadpool(svc.kill, data)
    except InstanceOperationError as e:
        logger.error(f"Kill VM Error {e}")
        raise HTTPException(status_code=500, detail={"error": str(e)})
    except Exception as e:
        logger.exception(f"Kill VM Error {e}")
        raise HTTPException(status_code=500, detail={"error": "Internal server error"})


# Only POST is accepted, everything else is a bad request rather than 405
@router.api_route("/launch", methods=NON_POST_METHODS, include_in_schema=False)
@router.api_route("/kill", methods=NON_POST_METHODS, include_in_schema=False)
async def reject_method(request: Request):
    raise _bad_request(f"Bad Method {request.method}")
