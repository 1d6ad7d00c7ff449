from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from interncoach.domain.internships import ValidationError
from interncoach.repositories.json_storage import StorageError
from interncoach.services.internship_service import InternshipService, NotFound

router = APIRouter(prefix="/api/internships", tags=["internships"])


def _get_service(request: Request) -> InternshipService:
    svc = getattr(getattr(request.app, "state", None), "internship_service", None)
    if not svc:
        raise RuntimeError("InternshipService not configured")
    return svc


def _error_response(message: str, status_code: int, **extra) -> JSONResponse:
    body = {"error": message}
    body.update(extra)
    return JSONResponse(body, status_code=status_code)


def _not_found() -> JSONResponse:
    return _error_response("Internship not found", 404)


def _invalid(exc: ValidationError) -> JSONResponse:
    return _error_response("Invalid internship", 422, details=exc.errors)


@router.get("")
def list_internships(request: Request):
    svc = _get_service(request)
    try:
        return svc.list()
    except StorageError:
        return _error_response("Failed to read internships", 500)


@router.post("", status_code=201)
def create_internship(payload: dict, request: Request):
    svc = _get_service(request)
    try:
        return svc.create(payload)
    except ValidationError as exc:
        return _invalid(exc)
    except StorageError:
        return _error_response("Failed to create internship", 500)


# Bulk clear shares the collection path, so it is declared before the /{id} routes.
@router.delete("")
def clear_internships(request: Request):
    svc = _get_service(request)
    try:
        svc.clear()
    except StorageError:
        return _error_response("Failed to clear internships", 500)
    return {"message": "All internships cleared successfully"}


@router.get("/{internship_id}")
def get_internship(internship_id: str, request: Request):
    svc = _get_service(request)
    try:
        return svc.get(internship_id)
    except NotFound:
        return _not_found()
    except StorageError:
        return _error_response("Failed to read internships", 500)


@router.delete("/{internship_id}")
def delete_internship(internship_id: str, request: Request):
    svc = _get_service(request)
    try:
        svc.delete(internship_id)
    except StorageError:
        return _error_response("Failed to delete internship", 500)
    return {"message": "Internship deleted successfully"}


@router.patch("/{internship_id}")
def update_internship(internship_id: str, payload: dict, request: Request):
    svc = _get_service(request)
    try:
        return svc.update(internship_id, payload)
    except NotFound:
        return _not_found()
    except ValidationError as exc:
        return _invalid(exc)
    except StorageError:
        return _error_response("Failed to update internship", 500)
