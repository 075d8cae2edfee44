"""
MongoDB access for the JamJob backend.

One MongoClient is opened per process by connect() on startup and closed by
close() on shutdown. Request handlers get the database through
get_database(), which tests override with a mongomock database.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

import config
from errors import BadRequest

logger = logging.getLogger(__name__)

USERS = "users"
JOBS = "jobs"

client: Optional[MongoClient] = None
db: Optional[Database] = None


def connect(url: Optional[str] = None, name: Optional[str] = None) -> Optional[Database]:
    """Open the process-wide client. Returns None when no URL is configured."""
    global client, db
    url = url or config.DATABASE_URL
    if not url:
        logger.warning("DATABASE_URL is not set; starting without a database")
        return None
    client = MongoClient(url)
    db = client[name or config.DATABASE_NAME]
    return db


def close() -> None:
    global client, db
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")
    client = None
    db = None


def ping(database: Database) -> None:
    database.client.admin.command("ping")
    logger.info("Pinged your deployment. You successfully connected to MongoDB!")


def ensure_indexes(database: Database) -> None:
    database[USERS].create_index([("email", ASCENDING)], unique=True)
    database[JOBS].create_index([("postedBy", ASCENDING)])


def get_database() -> Database:
    if db is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return db


def parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise BadRequest(f"Invalid job id: {value}")


def serialize_document(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy of a stored document with its ObjectId rendered as a string."""
    if document is None:
        return None
    result = dict(document)
    if isinstance(result.get("_id"), ObjectId):
        result["_id"] = str(result["_id"])
    return result


def create_document(database: Database, collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    """Insert one document and return its id as a string."""
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_none=True)
    else:
        data = dict(data)
    result = database[collection_name].insert_one(data)
    return str(result.inserted_id)


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    return [serialize_document(doc) for doc in database[collection_name].find(filter_dict or {})]
