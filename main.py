import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import ReturnDocument
from pymongo.database import Database

import media
from database import DATABASE_NAME, get_db, get_documents, to_object_id
from schemas import (
    ORDER_STATUSES,
    ORDERS_COLLECTION,
    TOOLS_COLLECTION,
    OrderStatusUpdate,
    ToolUpdate,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="E-commerce Admin Dashboard API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def respond(status_code: int = 200, **content) -> JSONResponse:
    """Wrap a payload in the {success, data|error, message} envelope."""
    body = jsonable_encoder(content, custom_encoder={ObjectId: str})
    return JSONResponse(status_code=status_code, content=body)


def not_found(resource: str) -> JSONResponse:
    return respond(404, success=False, error=f"{resource} not found")


@app.get("/")
def root():
    return {"status": "ok", "service": "admin-dashboard-api"}


@app.get("/test")
def test_database(db: Database = Depends(get_db)):
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": DATABASE_NAME,
        "connection_status": "Not Connected",
        "collections": [],
        "media_store": "✅ Configured" if media.is_configured() else "⚠️ Missing Cloudinary credentials",
    }
    try:
        response["collections"] = db.list_collection_names()[:10]
        response["database"] = "✅ Connected"
        response["connection_status"] = "Connected"
    except Exception as e:
        response["database"] = f"❌ Error: {str(e)[:80]}"
    return response


# Orders

@app.get("/api/orders")
def list_orders(db: Database = Depends(get_db)):
    try:
        orders = get_documents(db, ORDERS_COLLECTION)
        return respond(success=True, data=orders, message="Orders fetched successfully")
    except Exception as e:
        logger.exception("Error fetching orders")
        return respond(500, success=False, error="Failed to fetch orders", message=str(e))


@app.get("/api/orders/{order_id}")
def get_order(order_id: str, db: Database = Depends(get_db)):
    try:
        oid = to_object_id(order_id)
        order = db[ORDERS_COLLECTION].find_one({"_id": oid}) if oid else None
        if not order:
            return not_found("Order")
        return respond(success=True, data=order, message="Order fetched successfully")
    except Exception as e:
        logger.exception("Error fetching order %s", order_id)
        return respond(500, success=False, error="Failed to fetch order", message=str(e))


@app.put("/api/orders/{order_id}")
async def update_order_status(order_id: str, request: Request, db: Database = Depends(get_db)):
    """
    Change the status of an order. Only the status field is written.

    Malformed JSON and non-string statuses get the same 400 as an unknown
    status.
    """
    try:
        status = OrderStatusUpdate.model_validate(await request.json()).status
    except ValueError:
        status = None
    if status not in ORDER_STATUSES:
        return respond(
            400,
            success=False,
            error="Invalid status value",
            message=f"Status must be one of: {', '.join(ORDER_STATUSES)}",
        )
    try:
        oid = to_object_id(order_id)
        if oid is None:
            return not_found("Order")
        updated = db[ORDERS_COLLECTION].find_one_and_update(
            {"_id": oid},
            {"$set": {"status": status, "updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            return not_found("Order")
        logger.info("Order %s set to %s", order_id, status)
        return respond(success=True, data=updated, message="Order updated successfully")
    except Exception as e:
        logger.exception("Error updating order %s", order_id)
        return respond(500, success=False, error="Failed to update order", message=str(e))


# Tools

@app.get("/api/tools")
def list_tools(db: Database = Depends(get_db)):
    try:
        return respond(success=True, data=get_documents(db, TOOLS_COLLECTION))
    except Exception as e:
        logger.exception("Error fetching tools")
        return respond(500, success=False, error=str(e))


@app.get("/api/tools/{tool_id}")
def get_tool(tool_id: str, db: Database = Depends(get_db)):
    try:
        oid = to_object_id(tool_id)
        tool = db[TOOLS_COLLECTION].find_one({"_id": oid}) if oid else None
        if not tool:
            return not_found("Tool")
        return respond(success=True, data=tool)
    except Exception as e:
        logger.exception("Error fetching tool %s", tool_id)
        return respond(500, success=False, error=str(e))


@app.put("/api/tools/{tool_id}")
async def update_tool(
    tool_id: str,
    name: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    color: List[str] = Form(default=[]),
    existing_images: List[str] = Form(default=[], alias="existingImages"),
    images: List[UploadFile] = File(default=[]),
    db: Database = Depends(get_db),
):
    """
    Replace the submitted fields of a tool.

    New image files are uploaded one at a time and appended after the
    existing image URLs. If an upload fails the whole update is aborted;
    images uploaded before the failure stay in the media store.
    """
    try:
        oid = to_object_id(tool_id)
        if oid is None or db[TOOLS_COLLECTION].find_one({"_id": oid}, {"_id": 1}) is None:
            return not_found("Tool")

        fields = ToolUpdate(
            name=name,
            brand=brand,
            category=category,
            quantity=quantity,
            description=description,
            price=price,
            color=color,
            image=list(existing_images),
        )

        for upload in images:
            content = await upload.read()
            if not content:
                continue
            url = await run_in_threadpool(media.upload_image, content, media.MEDIA_FOLDER)
            fields.image.append(url)

        update = fields.to_update()
        update["updatedAt"] = datetime.now(timezone.utc)
        updated = db[TOOLS_COLLECTION].find_one_and_update(
            {"_id": oid},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            return not_found("Tool")
        return respond(success=True, data=updated)
    except Exception as e:
        logger.exception("Error updating tool %s", tool_id)
        return respond(400, success=False, error=str(e))


@app.delete("/api/tools/{tool_id}")
async def delete_tool(tool_id: str, db: Database = Depends(get_db)):
    try:
        oid = to_object_id(tool_id)
        tool = db[TOOLS_COLLECTION].find_one({"_id": oid}) if oid else None
        if not tool:
            return not_found("Tool")

        # Image cleanup is best-effort, the document goes either way
        for image_url in tool.get("image") or []:
            public_id = media.public_id_from_url(image_url, media.MEDIA_FOLDER)
            if not public_id:
                continue
            try:
                await run_in_threadpool(media.delete_image, public_id)
            except Exception as e:
                logger.warning("Error deleting image %s from media store: %s", public_id, e)

        db[TOOLS_COLLECTION].delete_one({"_id": oid})
        logger.info("Tool %s deleted", tool_id)
        return respond(success=True, message="Tool deleted successfully")
    except Exception as e:
        logger.exception("Error deleting tool %s", tool_id)
        return respond(500, success=False, error=str(e))


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
