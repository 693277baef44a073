import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import media
from database import create_document, get_db
from main import app
from schemas import Order, OrderItem, Tool


@pytest.fixture
def db():
    return mongomock.MongoClient()["admin_dashboard_test"]


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeMediaStore:
    """Records uploads and deletions instead of calling Cloudinary."""

    def __init__(self):
        self.uploaded = []
        self.deleted = []
        self.fail_upload_after = None
        self.fail_delete = False

    def upload_image(self, data, folder="tools"):
        if self.fail_upload_after is not None and len(self.uploaded) >= self.fail_upload_after:
            raise RuntimeError("Upload failed: no result")
        self.uploaded.append(data)
        return f"https://res.cloudinary.com/demo/image/upload/v1/{folder}/new{len(self.uploaded)}.jpg"

    def delete_image(self, public_id):
        if self.fail_delete:
            raise RuntimeError("cloudinary unavailable")
        self.deleted.append(public_id)


@pytest.fixture
def media_store(monkeypatch):
    store = FakeMediaStore()
    monkeypatch.setattr(media, "upload_image", store.upload_image)
    monkeypatch.setattr(media, "delete_image", store.delete_image)
    return store


@pytest.fixture
def order_id(db):
    order = Order(
        customer_name="Jane Wanjiku",
        customer_email="jane@example.com",
        phone="0712345678",
        shipping_address="Moi Avenue, Nairobi",
        transaction_code="QGH7X2ABCD",
        items=[
            OrderItem(product_id=str(ObjectId()), name="Cordless Drill", price=4500.0, quantity=2,
                      image="https://res.cloudinary.com/demo/image/upload/v1/tools/drill.jpg"),
            OrderItem(name="Hammer", price=800.0, quantity=1),
        ],
        total=9800.0,
    )
    return create_document(db, "orders", order)


@pytest.fixture
def tool_id(db):
    tool = Tool(
        name="Cordless Drill",
        brand="Makita",
        category="Power Tools",
        quantity=12,
        description="18V drill driver",
        price=4500.0,
        color=["blue", "black"],
        image=[
            "https://res.cloudinary.com/demo/image/upload/v1/tools/drill-front.jpg",
            "https://res.cloudinary.com/demo/image/upload/v1/tools/drill-side.png",
        ],
    )
    return create_document(db, "tools", tool)
