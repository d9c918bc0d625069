from fastapi import Request

from order_service.service import OrderService


def get_order_service(request: Request) -> OrderService:
    """OrderService built in the app lifespan (one store per app instance)."""
    return request.app.state.order_service
