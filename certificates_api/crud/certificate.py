import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import ConnectionFailure, PyMongoError

from certificates_api.core.exceptions import StoreError
from certificates_api.db.database import MongoConnectionManager, get_mongo

logger = logging.getLogger(__name__)

# _id never leaves the repository
DEFAULT_PROJECTION = {"_id": 0}
LIST_PROJECTION = {"_id": 0, "image": 0}


class CertificateRepository:
    """Data access for certificate documents, keyed by the business `id`"""

    def __init__(self, manager: MongoConnectionManager):
        self.manager = manager

    def _failed(self, action: str, e: PyMongoError) -> StoreError:
        logger.error(f"Failed to {action}: {str(e)}")
        if isinstance(e, ConnectionFailure):
            self.manager.mark_disconnected()
        return StoreError(detail=f"Failed to {action}")

    async def upsert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert or overwrite the document with record["id"] in one atomic write"""
        collection = self.manager.collection
        now = datetime.now(timezone.utc)
        try:
            return await collection.find_one_and_update(
                {"id": record["id"]},
                {
                    "$set": {**record, "updatedAt": now},
                    "$setOnInsert": {"savedAt": now},
                },
                projection=DEFAULT_PROJECTION,
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise self._failed("save certificate", e) from e

    async def list_all(self) -> List[Dict[str, Any]]:
        """All certificates, most recently updated first, without images"""
        collection = self.manager.collection
        try:
            cursor = collection.find({}, LIST_PROJECTION, sort=[("updatedAt", DESCENDING)])
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._failed("list certificates", e) from e

    async def get_by_id(self, cert_id: str) -> Optional[Dict[str, Any]]:
        collection = self.manager.collection
        try:
            return await collection.find_one({"id": cert_id}, DEFAULT_PROJECTION)
        except PyMongoError as e:
            raise self._failed("get certificate", e) from e

    async def find_by_registration_number(self, registration_number: str) -> Optional[Dict[str, Any]]:
        # registrationNumber is not unique; the first match in store order wins
        collection = self.manager.collection
        try:
            return await collection.find_one(
                {"registrationNumber": registration_number}, DEFAULT_PROJECTION
            )
        except PyMongoError as e:
            raise self._failed("search certificate", e) from e

    async def delete_by_id(self, cert_id: str) -> bool:
        collection = self.manager.collection
        try:
            result = await collection.delete_one({"id": cert_id})
            return result.deleted_count > 0
        except PyMongoError as e:
            raise self._failed("delete certificate", e) from e


def get_certificate_repository(
    mongo: MongoConnectionManager = Depends(get_mongo),
) -> CertificateRepository:
    return CertificateRepository(mongo)
