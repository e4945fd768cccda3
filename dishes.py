"""
Dishes Routes

GET/POST /dishes and GET/PUT /dishes/{dish_id}. Dishes are never deleted.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from database import Database, get_db, create_document, get_documents, serialize_doc, update_document
from schemas import RequestEnvelope
from validators import (
    OK, Err, RequestContext, Result,
    body_id_matches_route, has_property, is_positive_int, is_url, record_exists, run_validators,
)

router = APIRouter(prefix="/dishes", tags=["dishes"])

DISH_FIELDS = ("name", "description", "price", "image_url")


# ===================== Validators =====================
def price_is_valid(ctx: RequestContext) -> Result:
    if is_positive_int(ctx.data.get("price")):
        return OK
    return Err(400, "Dish must have a price that is an integer greater than 0")


def image_url_is_valid(ctx: RequestContext) -> Result:
    if is_url(ctx.data.get("image_url")):
        return OK
    return Err(400, "Malformed URL in property 'image_url'.")


dish_exists = record_exists("Dish", "dishes", "dish")

DISH_BODY_CHAIN = [
    has_property("Dish", "name"),
    has_property("Dish", "description"),
    has_property("Dish", "price"),
    price_is_valid,
    has_property("Dish", "image_url"),
    image_url_is_valid,
]

CREATE_CHAIN = DISH_BODY_CHAIN
READ_CHAIN = [dish_exists]
UPDATE_CHAIN = [dish_exists, *DISH_BODY_CHAIN, body_id_matches_route("Dish")]


def _context(db: Database, payload: Optional[RequestEnvelope], dish_id: Optional[str] = None) -> RequestContext:
    data = (payload.data if payload else None) or {}
    return RequestContext(db=db, data=data, route_id=dish_id)


def _dish_fields(data: dict) -> dict:
    return {name: data.get(name) for name in DISH_FIELDS}


# ===================== Handlers =====================
@router.get("")
def list_dishes(db: Database = Depends(get_db)):
    return {"data": get_documents(db, "dishes")}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_dish(payload: Optional[RequestEnvelope] = None, db: Database = Depends(get_db)):
    ctx = run_validators(CREATE_CHAIN, _context(db, payload))
    dish = create_document(db, "dishes", _dish_fields(ctx.data))
    return {"data": serialize_doc(dish)}


@router.get("/{dish_id}")
def read_dish(dish_id: str, db: Database = Depends(get_db)):
    ctx = run_validators(READ_CHAIN, _context(db, None, dish_id))
    return {"data": serialize_doc(ctx.locals["dish"])}


@router.put("/{dish_id}")
def update_dish(dish_id: str, payload: Optional[RequestEnvelope] = None, db: Database = Depends(get_db)):
    ctx = run_validators(UPDATE_CHAIN, _context(db, payload, dish_id))
    dish = update_document(db, "dishes", dish_id, _dish_fields(ctx.data))
    return {"data": serialize_doc(dish)}
