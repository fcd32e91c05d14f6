import logging
from fastapi import APIRouter, Body, Depends, Response
from typing import Any, List

from certificates_api.crud.certificate import CertificateRepository, get_certificate_repository
from certificates_api.schemas.certificate import (
    CertificateDeleteResponse,
    CertificateRead,
    CertificateSaveRequest,
    CertificateSaveResponse,
    CertificateSummary,
)
from certificates_api.utils.images import decode_image
from certificates_api.utils.normalization import build_certificate_record, missing_required_fields
from certificates_api.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/certificates", tags=["certificates"])


@router.post("/save", response_model=CertificateSaveResponse)
async def save_certificate(
    data: Any = Body(None),
    repo: CertificateRepository = Depends(get_certificate_repository)
):
    """
    Create a certificate, or overwrite the one with the same `id`.
    Without an `id` a new one is generated.
    """
    # Any JSON value is accepted so that non-object bodies answer 400 like missing fields
    payload = CertificateSaveRequest.parse_obj(data).dict() if isinstance(data, dict) else {}
    if missing_required_fields(payload):
        raise ValidationError("Missing required fields: registrationNumber and studentName")

    record = build_certificate_record(payload)
    certificate = await repo.upsert(record)
    logger.info(f"Saved certificate {record['id']}")
    return {"id": record["id"], "certificate": certificate}


@router.get("/list", response_model=List[CertificateSummary])
async def list_certificates(
    repo: CertificateRepository = Depends(get_certificate_repository)
):
    return await repo.list_all()


@router.get("/image/{cert_id}", responses={200: {"content": {"image/png": {}}}})
async def get_certificate_image(
    cert_id: str,
    repo: CertificateRepository = Depends(get_certificate_repository)
):
    certificate = await repo.get_by_id(cert_id)
    if not certificate or not certificate.get("image"):
        raise NotFoundError("Image not found")

    content, mime_type = decode_image(certificate["image"])
    return Response(content=content, media_type=mime_type)


@router.get("/search/byRegNumber/{reg_number}", response_model=CertificateRead)
async def search_by_registration_number(
    reg_number: str,
    repo: CertificateRepository = Depends(get_certificate_repository)
):
    certificate = await repo.find_by_registration_number(reg_number)
    if not certificate:
        raise NotFoundError()
    return certificate


@router.get("/{cert_id}", response_model=CertificateRead)
async def get_certificate(
    cert_id: str,
    repo: CertificateRepository = Depends(get_certificate_repository)
):
    certificate = await repo.get_by_id(cert_id)
    if not certificate:
        raise NotFoundError()
    return certificate


@router.delete("/{cert_id}", response_model=CertificateDeleteResponse)
async def delete_certificate(
    cert_id: str,
    repo: CertificateRepository = Depends(get_certificate_repository)
):
    deleted = await repo.delete_by_id(cert_id)
    if not deleted:
        raise NotFoundError()
    return CertificateDeleteResponse()
