"""
Database Helper Functions

In-memory store helpers ready to use in the route handlers.
A Database owns one ordered Collection per resource ("dishes", "orders")
plus the id generator used for new records. Route handlers receive it
through the get_db dependency, so tests can swap in an isolated instance.
"""

import json
import logging
from typing import Callable, Dict, Iterator, List, Optional, Type

from bson import ObjectId
from pydantic import BaseModel, ValidationError as PydanticValidationError

from errors import ValidationError
from schemas import Dish, Order

logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]


class ObjectIdGenerator:
    """Default generator: 24-char hex ids from bson.ObjectId."""

    def __call__(self) -> str:
        return str(ObjectId())


class CounterIdGenerator:
    """Monotonic string ids ("1", "2", ...). Deterministic, handy in tests."""

    def __init__(self, start: int = 1):
        self._next = start

    def __call__(self) -> str:
        value = str(self._next)
        self._next += 1
        return value


class Collection:
    """Ordered sequence of records of a single model type."""

    def __init__(self, name: str, model: Type[BaseModel]):
        self.name = name
        self.model = model
        self._records: List[BaseModel] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BaseModel]:
        return iter(list(self._records))

    def __contains__(self, record_id: str) -> bool:
        return self.find(record_id) is not None

    def list(self) -> List[BaseModel]:
        return list(self._records)

    def find(self, record_id: str) -> Optional[BaseModel]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def append(self, record: BaseModel) -> BaseModel:
        self._records.append(record)
        return record

    def replace(self, record_id: str, record: BaseModel) -> bool:
        for index, existing in enumerate(self._records):
            if existing.id == record_id:
                self._records[index] = record
                return True
        return False

    def remove(self, record_id: str) -> bool:
        for index, existing in enumerate(self._records):
            if existing.id == record_id:
                del self._records[index]
                return True
        return False


class Database:
    def __init__(self, id_generator: Optional[IdGenerator] = None):
        self.id_generator = id_generator or ObjectIdGenerator()
        self._collections: Dict[str, Collection] = {
            "dishes": Collection("dishes", Dish),
            "orders": Collection("orders", Order),
        }
        # Ids handed out or loaded so far, per collection; never reused
        self._used_ids: Dict[str, set] = {name: set() for name in self._collections}

    def __getitem__(self, collection_name: str) -> Collection:
        return self._collections[collection_name]

    def list_collection_names(self) -> List[str]:
        return list(self._collections)

    def next_id(self, collection_name: str) -> str:
        used = self._used_ids[collection_name]
        record_id = self.id_generator()
        while record_id in used:
            record_id = self.id_generator()
        used.add(record_id)
        return record_id

    def reserve_id(self, collection_name: str, record_id: str) -> None:
        self._used_ids[collection_name].add(record_id)


db = Database()


def get_db() -> Database:
    """FastAPI dependency returning the process-wide store."""
    return db


# CRUD helpers

def _build(collection: Collection, record_id: str, data: dict) -> BaseModel:
    payload = dict(data)
    payload["id"] = record_id
    try:
        return collection.model.model_validate(payload)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"])
        raise ValidationError(f"Invalid value for '{field}': {first['msg']}") from exc


def create_document(database: Database, collection_name: str, data: dict) -> BaseModel:
    collection = database[collection_name]
    record = _build(collection, database.next_id(collection_name), data)
    collection.append(record)
    logger.info(
        f"Created {collection_name} record {record.id}",
        extra={"resource": collection_name, "record_id": record.id},
    )
    return record


def get_documents(database: Database, collection_name: str) -> List[dict]:
    return [serialize_doc(record) for record in database[collection_name]]


def get_document_by_id(database: Database, collection_name: str, _id: str) -> Optional[BaseModel]:
    return database[collection_name].find(_id)


def update_document(database: Database, collection_name: str, _id: str, update_data: dict) -> Optional[BaseModel]:
    """Full replace of every mutable field; the id is kept."""
    collection = database[collection_name]
    if _id not in collection:
        return None
    record = _build(collection, _id, update_data)
    collection.replace(_id, record)
    logger.info(
        f"Updated {collection_name} record {_id}",
        extra={"resource": collection_name, "record_id": _id},
    )
    return record


def delete_document(database: Database, collection_name: str, _id: str) -> bool:
    removed = database[collection_name].remove(_id)
    if removed:
        logger.info(
            f"Deleted {collection_name} record {_id}",
            extra={"resource": collection_name, "record_id": _id},
        )
    return removed


def load_seed_data(database: Database, path: str) -> Dict[str, int]:
    """Load {"dishes": [...], "orders": [...]} from a JSON file.

    Seeded records keep their own ids when they carry one; the ids are
    reserved so generated ids never collide with them.
    """
    with open(path, encoding="utf-8") as fh:
        seed = json.load(fh)

    # Reserve every explicit id before any id is generated
    for collection_name in database.list_collection_names():
        seen = {record.id for record in database[collection_name]}
        for item in seed.get(collection_name, []):
            if not item.get("id"):
                continue
            record_id = str(item["id"])
            if record_id in seen:
                raise ValueError(f"Duplicate {collection_name} id in seed data: {record_id}")
            seen.add(record_id)
            database.reserve_id(collection_name, record_id)

    counts = {}
    for collection_name in database.list_collection_names():
        collection = database[collection_name]
        for item in seed.get(collection_name, []):
            if item.get("id"):
                record_id = str(item["id"])
            else:
                record_id = database.next_id(collection_name)
            collection.append(_build(collection, record_id, item))
        counts[collection_name] = len(collection)
    logger.info(f"Loaded seed data from {path}: {counts}")
    return counts


# Utility

def serialize_doc(record: Optional[BaseModel]) -> Optional[dict]:
    if record is None:
        return None
    return record.model_dump()
