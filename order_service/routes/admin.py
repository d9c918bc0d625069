from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from order_service.deps import get_order_service
from order_service.service import OrderService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reset")
async def reset_store(service: OrderService = Depends(get_order_service)) -> JSONResponse:
    """
    Drop every order and restart the id sequence at 1.
    Administrative reset; not part of the normal order flow.
    """
    cleared = service.reset()
    return JSONResponse(
        status_code=200,
        content={"status": "ok", "cleared": cleared},
    )
