"""
Schemas for the Restaurant Ordering API

Each record model below corresponds to an in-memory collection.
The collection name is the plural lowercase class name (e.g., Dish -> "dishes").

Request bodies are not bound to these models directly: the validator chains
in dishes.py and orders.py check the raw "data" object first so that every
failure carries its own message. The models only describe stored records.
"""
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_serializer

ORDER_STATUSES = ("pending", "preparing", "out-for-delivery", "delivered")

OrderStatus = Literal["pending", "preparing", "out-for-delivery", "delivered"]


class Dish(BaseModel):
    id: str = Field(..., description="Server-assigned dish id")
    name: str = Field(..., description="Dish name")
    description: str = Field(..., description="Short description")
    price: int = Field(..., gt=0, description="Price in whole currency units")
    image_url: str = Field(..., description="Dish image URL")


class OrderDish(BaseModel):
    # Clients may send a full copy of the dish alongside the quantity
    model_config = ConfigDict(extra="allow")

    dishId: Optional[str] = Field(None, description="Reference to dish id")
    quantity: int = Field(..., gt=0)

    @model_serializer(mode="wrap")
    def _omit_unsent_dish_id(self, handler):
        data = handler(self)
        if "dishId" not in self.model_fields_set:
            data.pop("dishId", None)
        return data


class Order(BaseModel):
    id: str = Field(..., description="Server-assigned order id")
    deliverTo: str = Field(..., description="Delivery address")
    mobileNumber: str = Field(..., description="Contact number")
    status: OrderStatus = "pending"
    dishes: List[OrderDish] = Field(..., min_length=1)


class RequestEnvelope(BaseModel):
    """Every request body is wrapped as {"data": {...}}."""
    data: Optional[Dict[str, Any]] = None


"""
Notes:
- Responses are wrapped the same way: {"data": <record or list>}.
- Orders reference dishes by id only; dishes never reference orders.
"""
