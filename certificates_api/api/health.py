from fastapi import APIRouter, Depends

from certificates_api.db.database import MongoConnectionManager, get_mongo
from certificates_api.schemas.certificate import HealthRead

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthRead)
async def health_check(mongo: MongoConnectionManager = Depends(get_mongo)):
    # Anything short of an established connection reports as disconnected
    return {"status": "ok", "mongo": "connected" if mongo.is_connected else "disconnected"}
