from datetime import datetime, timezone
from fastapi import APIRouter

from bookstore.schemas.common import ApiResponse

router = APIRouter(tags=["health"])


@router.get("/health-check", response_model=ApiResponse[dict[str, str]])
def health_check():
    """Liveness probe."""
    now = datetime.now(timezone.utc)
    return ApiResponse(
        message="Hello World!",
        data={"date": now.strftime("%a %b %d %Y"), "timestamp": now.isoformat()},
    )
