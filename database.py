import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, Request
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

import config

logger = logging.getLogger("eats_exchange.database")


class MongoDatabase:
    """Owns the process-wide MongoClient between startup and shutdown."""

    def __init__(self, url: str, name: str):
        self.url = url
        self.name = name
        self._client: Optional[MongoClient] = None

    def connect(self) -> Database:
        if self._client is None:
            self._client = MongoClient(self.url)
            logger.info("MongoDB client created for database %s", self.name)
        return self._client[self.name]

    @property
    def db(self) -> Database:
        if self._client is None:
            raise RuntimeError("MongoDB client is not connected")
        return self._client[self.name]

    def collection(self, name: str) -> Collection:
        return self.db[name]

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB client closed")


def get_mongo(request: Request) -> MongoDatabase:
    return request.app.state.mongo


def get_food_collection(mongo: MongoDatabase = Depends(get_mongo)) -> Collection:
    return mongo.collection(config.FOOD_COLLECTION)


def get_request_collection(mongo: MongoDatabase = Depends(get_mongo)) -> Collection:
    return mongo.collection(config.REQUEST_COLLECTION)


def parse_object_id(id_str: str) -> ObjectId:
    if not ObjectId.is_valid(id_str):
        raise HTTPException(status_code=400, detail="Invalid ID")
    return ObjectId(id_str)


def serialize_doc(doc: Optional[Dict[str, Any]]):
    if not doc:
        return doc
    doc = dict(doc)
    if isinstance(doc.get("_id"), ObjectId):
        doc["_id"] = str(doc["_id"])
    return doc


# Driver acknowledgements, keyed the way the web client reads them

def insert_ack(result) -> Dict[str, Any]:
    return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}


def update_ack(result) -> Dict[str, Any]:
    upserted_id = result.upserted_id
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedCount": 1 if upserted_id is not None else 0,
        "upsertedId": str(upserted_id) if upserted_id is not None else None,
    }


def delete_ack(result) -> Dict[str, Any]:
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}
