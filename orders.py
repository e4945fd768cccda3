"""
Orders Routes

GET/POST /orders and GET/PUT/DELETE /orders/{order_id}.
New orders always start as "pending"; only pending orders can be deleted
and delivered orders can no longer be changed.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from database import (
    Database, get_db, create_document, delete_document, get_documents, serialize_doc, update_document,
)
from errors import StatePreconditionError
from schemas import ORDER_STATUSES, RequestEnvelope
from validators import (
    OK, Err, RequestContext, Result,
    body_id_matches_route, has_property, is_positive_int, record_exists, run_validators,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])

STATUS_MESSAGE = f"Order must have a status of {', '.join(ORDER_STATUSES)}"


# ===================== Validators =====================
def dishes_is_valid(ctx: RequestContext) -> Result:
    dishes = ctx.data.get("dishes")
    if isinstance(dishes, list) and dishes:
        return OK
    return Err(400, "Order must include at least one dish")


def quantities_are_valid(ctx: RequestContext) -> Result:
    for index, dish in enumerate(ctx.data["dishes"]):
        quantity = dish.get("quantity") if isinstance(dish, dict) else None
        if not is_positive_int(quantity):
            return Err(400, f"dish {index} must have a quantity that is an integer greater than 0")
    return OK


def status_is_valid(ctx: RequestContext) -> Result:
    if ctx.data.get("status") in ORDER_STATUSES:
        return OK
    return Err(400, STATUS_MESSAGE)


def order_not_delivered(ctx: RequestContext) -> Result:
    if ctx.locals["order"].status != "delivered":
        return OK
    return Err(400, "A delivered order cannot be changed", StatePreconditionError)


def order_is_pending(ctx: RequestContext) -> Result:
    if ctx.locals["order"].status == "pending":
        return OK
    return Err(404, "An order cannot be deleted unless it is pending", StatePreconditionError)


order_exists = record_exists("Order", "orders", "order")

ORDER_BODY_CHAIN = [
    has_property("Order", "deliverTo"),
    has_property("Order", "mobileNumber"),
    has_property("Order", "dishes", "Order must include a dish"),
    dishes_is_valid,
    quantities_are_valid,
]

CREATE_CHAIN = ORDER_BODY_CHAIN
READ_CHAIN = [order_exists]
UPDATE_CHAIN = [
    order_exists,
    *ORDER_BODY_CHAIN,
    status_is_valid,
    body_id_matches_route("Order", suffix="."),
    order_not_delivered,
]
DELETE_CHAIN = [order_exists, order_is_pending]


def _context(db: Database, payload: Optional[RequestEnvelope], order_id: Optional[str] = None) -> RequestContext:
    data = (payload.data if payload else None) or {}
    return RequestContext(db=db, data=data, route_id=order_id)


def _order_fields(data: dict, order_status: str) -> dict:
    return {
        "deliverTo": data["deliverTo"],
        "mobileNumber": data["mobileNumber"],
        "status": order_status,
        "dishes": data["dishes"],
    }


# ===================== Handlers =====================
@router.get("")
def list_orders(db: Database = Depends(get_db)):
    return {"data": get_documents(db, "orders")}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(payload: Optional[RequestEnvelope] = None, db: Database = Depends(get_db)):
    ctx = run_validators(CREATE_CHAIN, _context(db, payload))
    order = create_document(db, "orders", _order_fields(ctx.data, "pending"))
    return {"data": serialize_doc(order)}


@router.get("/{order_id}")
def read_order(order_id: str, db: Database = Depends(get_db)):
    ctx = run_validators(READ_CHAIN, _context(db, None, order_id))
    return {"data": serialize_doc(ctx.locals["order"])}


@router.put("/{order_id}")
def update_order(order_id: str, payload: Optional[RequestEnvelope] = None, db: Database = Depends(get_db)):
    ctx = run_validators(UPDATE_CHAIN, _context(db, payload, order_id))
    previous = ctx.locals["order"].status
    order = update_document(db, "orders", order_id, _order_fields(ctx.data, ctx.data["status"]))
    if order.status != previous:
        logger.info(f"Order {order_id} moved from {previous} to {order.status}")
    return {"data": serialize_doc(order)}


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(order_id: str, db: Database = Depends(get_db)):
    run_validators(DELETE_CHAIN, _context(db, None, order_id))
    delete_document(db, "orders", order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
