from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException, Query, Request, Response
from fastapi.concurrency import run_in_threadpool

from pipelines.validation import (
    BagNotFoundError,
    BagValidationService,
    InformationPackageType,
    ValidateCommand,
    ValidateOk,
    render_yaml,
)


router = APIRouter(prefix="/validate", tags=["validate"])

_YAML_TYPES = ("application/yaml", "application/x-yaml", "text/yaml")


def _service(request: Request) -> BagValidationService:
    return request.app.state.validation_service


def _respond(request: Request, report: ValidateOk):
    accept = request.headers.get("accept", "")
    if any(media_type in accept for media_type in _YAML_TYPES):
        return Response(content=render_yaml(report), media_type="application/yaml")
    return report.model_dump(mode="json", by_alias=True)


@router.post("/local-dir")
def validate_local_dir(command: ValidateCommand, request: Request):
    try:
        report = _service(request).validate_dir(
            Path(command.bag_location),
            package_type=command.package_type,
            bag_location=command.bag_location,
        )
    except BagNotFoundError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _respond(request, report)


@router.post("/zip")
async def validate_zip(
    request: Request,
    package_type: InformationPackageType = Query(InformationPackageType.DEPOSIT, alias="packageType"),
):
    data = await request.body()
    if not data:
        raise HTTPException(status_code=400, detail="Request body must contain a zipped bag.")
    try:
        report = await run_in_threadpool(_service(request).validate_zip, data, package_type=package_type)
    except BagNotFoundError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _respond(request, report)
