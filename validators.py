"""
Validator Chain

A validator takes the RequestContext and returns Ok or Err. run_validators
walks a chain in order and raises on the first Err, so the handler only
runs once every check has passed.

The builders below produce validators shared by the dishes and orders
routes; resource-specific checks live next to their routes.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Type, Union

from pydantic import AnyUrl, TypeAdapter, ValidationError as PydanticValidationError

from database import Database
from errors import ApiError, NotFoundError, RouteIdMismatchError, ValidationError


@dataclass(frozen=True)
class Ok:
    pass


@dataclass(frozen=True)
class Err:
    status: int
    message: str
    error: Type[ApiError] = ValidationError


Result = Union[Ok, Err]

OK = Ok()


@dataclass
class RequestContext:
    db: Database
    data: Dict[str, Any] = field(default_factory=dict)
    route_id: Optional[str] = None
    # Values found by earlier validators (e.g. the located record)
    locals: Dict[str, Any] = field(default_factory=dict)


Validator = Callable[[RequestContext], Result]


def run_validators(chain: Iterable[Validator], ctx: RequestContext) -> RequestContext:
    for validator in chain:
        result = validator(ctx)
        if isinstance(result, Err):
            raise result.error(result.message, result.status)
    return ctx


def is_positive_int(value: Any) -> bool:
    """True for integers > 0, including integral floats such as 8.0."""
    # bool is a subclass of int but never a valid count or price
    if isinstance(value, bool):
        return False
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return isinstance(value, int) and value > 0


_url_adapter = TypeAdapter(AnyUrl)


def is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


# Builders

def has_property(resource: str, property_name: str, message: Optional[str] = None) -> Validator:
    """Fails with 400 when the property is absent or falsy."""
    error = message or f"{resource} must include a {property_name}"

    def validator(ctx: RequestContext) -> Result:
        if ctx.data.get(property_name):
            return OK
        return Err(400, error)

    validator.__name__ = f"has_{property_name}"
    return validator


def record_exists(resource: str, collection_name: str, local_name: str) -> Validator:
    """Looks the route id up and stores the record in ctx.locals[local_name]."""

    def validator(ctx: RequestContext) -> Result:
        record = ctx.db[collection_name].find(ctx.route_id)
        if record is None:
            return Err(404, f"{resource} does not exist: {ctx.route_id}.", NotFoundError)
        ctx.locals[local_name] = record
        return OK

    validator.__name__ = f"{local_name}_exists"
    return validator


def body_id_matches_route(resource: str, suffix: str = "") -> Validator:
    """A body id, when given, must equal the route id."""

    def validator(ctx: RequestContext) -> Result:
        body_id = ctx.data.get("id")
        if not body_id or body_id == ctx.route_id:
            return OK
        return Err(
            404,
            f"{resource} id does not match route id. "
            f"{resource}: {body_id}, Route: {ctx.route_id}{suffix}",
            RouteIdMismatchError,
        )

    validator.__name__ = "body_id_matches_route"
    return validator
