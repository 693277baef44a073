from datetime import datetime

import mongomock
from bson import ObjectId

import database
from schemas import Tool


def test_connect_reuses_client(monkeypatch):
    created = []

    def fake_client(url):
        created.append(url)
        return mongomock.MongoClient()

    monkeypatch.setattr(database, "_client", None)
    monkeypatch.setattr(database, "MongoClient", fake_client)
    first = database.connect()
    second = database.get_db()
    assert len(created) == 1
    assert first.name == second.name == database.DATABASE_NAME


def test_to_object_id():
    oid = ObjectId()
    assert database.to_object_id(str(oid)) == oid
    assert database.to_object_id("123") is None


def test_create_document_stamps_timestamps():
    db = mongomock.MongoClient()["test"]
    tool_id = database.create_document(db, "tools", Tool(name="Saw", price=12.5))
    stored = db["tools"].find_one({"_id": ObjectId(tool_id)})
    assert stored["name"] == "Saw"
    assert stored["createdAt"] is not None
    assert stored["updatedAt"] is not None
    assert "brand" not in stored


def test_get_documents_newest_first():
    db = mongomock.MongoClient()["test"]
    database.create_document(db, "tools", {"name": "Saw", "createdAt": datetime(2024, 1, 1)})
    database.create_document(db, "tools", {"name": "Grinder", "createdAt": datetime(2024, 3, 1)})
    database.create_document(db, "tools", {"name": "Drill", "createdAt": datetime(2024, 2, 1)})
    assert [t["name"] for t in database.get_documents(db, "tools")] == ["Grinder", "Drill", "Saw"]
