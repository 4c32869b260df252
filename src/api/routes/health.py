from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.adapter.database import Database
from src.depends import get_database

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(database: Database = Depends(get_database)):
    """Liveness plus database reachability."""
    if await database.ping():
        return {"status": "ok"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unavailable", "database": "unreachable"},
    )
