from pydantic import BaseModel
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

Number = Union[int, float]


class GradeRead(BaseModel):
    subject: str = ""
    first: Number = 0
    second: Number = 0


class CertificateSaveRequest(BaseModel):
    """
    Raw save payload. Fields are loosely typed on purpose: coercion and
    defaults are applied by the normalization layer, and missing required
    fields are answered with 400 rather than a schema error.
    """
    id: Optional[Any] = None
    registrationNumber: Optional[Any] = None
    studentName: Optional[Any] = None
    studentCategory: Optional[Any] = None
    studentCenter: Optional[Any] = None
    certification: Optional[Any] = None
    image: Optional[Any] = None

    class Config:
        extra = "allow"


class CertificateSummary(BaseModel):
    id: str
    registrationNumber: str
    studentName: str
    studentCategory: str = ""
    studentCenter: str = ""
    sigName: str = ""
    attendance: Optional[Number] = 0
    absence: Optional[Number] = 0
    grades: List[GradeRead] = []
    lang: str = "ar"
    average: Optional[Number] = None
    certification: Dict[str, Any] = {}
    savedAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        # Older documents may carry fields that are no longer declared
        extra = "allow"


class CertificateRead(CertificateSummary):
    image: Optional[str] = None


class CertificateSaveResponse(BaseModel):
    success: bool = True
    message: str = "Certificate saved successfully"
    id: str
    certificate: CertificateRead


class CertificateDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Certificate deleted successfully"


class HealthRead(BaseModel):
    status: str = "ok"
    mongo: str
