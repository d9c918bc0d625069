from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from order_service.deps import get_order_service
from order_service.errors import OrderNotFoundError
from order_service.models import Order, OrderStatus
from order_service.service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


class CreateOrderBody(BaseModel):
    customer_name: str = Field(..., description="Customer name (non-blank)")
    total: Decimal = Field(..., description="Order total, positive")
    order_date: str = Field(..., description="Order date in dd-MM-yyyy", examples=["15-12-2024"])


class ApplyCouponBody(BaseModel):
    order_id: int = Field(..., gt=0)
    coupon: str = Field(..., description="OFF<N> or VALOR<amount>", examples=["OFF10", "VALOR25.50"])


class OrderIdBody(BaseModel):
    order_id: int = Field(..., gt=0)


class OrderResponse(BaseModel):
    id: int
    customer_name: str
    total: Decimal
    order_date: date
    status: OrderStatus
    status_description: str

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            total=order.total,
            order_date=order.order_date,
            status=order.status,
            status_description=order.status.description,
        )


class CouponResponse(BaseModel):
    order_id: int
    new_total: Decimal


class FulfillResponse(BaseModel):
    order_id: int
    status: OrderStatus
    message: str


@router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderBody, service: OrderService = Depends(get_order_service)) -> OrderResponse:
    order = service.create_order(body.customer_name, body.total, body.order_date)
    return OrderResponse.from_order(order)


@router.get("", response_model=list[OrderResponse])
async def list_orders(service: OrderService = Depends(get_order_service)) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in service.list_orders()]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, service: OrderService = Depends(get_order_service)) -> OrderResponse:
    order = service.get_order(order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return OrderResponse.from_order(order)


@router.post("/apply-coupon", response_model=CouponResponse)
async def apply_coupon(body: ApplyCouponBody, service: OrderService = Depends(get_order_service)) -> CouponResponse:
    new_total = service.apply_coupon(body.order_id, body.coupon)
    return CouponResponse(order_id=body.order_id, new_total=new_total)


@router.post("/pay", response_model=OrderResponse)
async def pay_order(body: OrderIdBody, service: OrderService = Depends(get_order_service)) -> OrderResponse:
    return OrderResponse.from_order(service.pay_order(body.order_id))


@router.post("/fulfill", response_model=FulfillResponse)
async def fulfill_order(body: OrderIdBody, service: OrderService = Depends(get_order_service)) -> FulfillResponse:
    """
    Fulfill a paid order, or any order whose total is zero.
    Returns the formatted total and status description, e.g. "R$ 0,00 | Entregue".
    """
    result = service.fulfill_order(body.order_id)
    return FulfillResponse(order_id=result.order.id, status=result.order.status, message=result.message)
