r"""backend\salescast\api\v1\health.py

Health check endpoint for orchestrators and load balancers.  It never
touches the transaction snapshot, so it stays cheap and exempt from auth.
"""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Return a basic liveness indicator."""
    return {"status": "ok", "service": "salescast"}
