"""
MongoDB connection for the admin dashboard API.

A single MongoClient is created on first use and shared by every request.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from dotenv import load_dotenv
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "admin_dashboard")

_client: Optional[MongoClient] = None


def connect() -> Database:
    """Return the shared database handle, creating the client if needed."""
    global _client
    if _client is None:
        logger.info("Connecting to MongoDB database %s", DATABASE_NAME)
        _client = MongoClient(DATABASE_URL)
    return _client[DATABASE_NAME]


def get_db():
    """FastAPI dependency yielding the shared database handle."""
    return connect()


def to_object_id(value: str) -> Optional[ObjectId]:
    # Malformed ids can never match a document
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def create_document(db: Database, collection_name: str, data: Any) -> str:
    """
    Insert a document stamped with createdAt/updatedAt, return its id.

    No route here creates orders or tools; this is the insert path for the
    storefront and import scripts that do.
    """
    if isinstance(data, BaseModel):
        doc = data.model_dump(by_alias=True, exclude_none=True)
    else:
        doc = dict(data)
    now = datetime.now(timezone.utc)
    doc.setdefault("createdAt", now)
    doc["updatedAt"] = now
    result = db[collection_name].insert_one(doc)
    return str(result.inserted_id)


def get_documents(db: Database, collection_name: str) -> List[Dict[str, Any]]:
    """All documents of a collection, newest first."""
    return list(db[collection_name].find({}).sort("createdAt", -1))
