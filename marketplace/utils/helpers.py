from datetime import datetime
from typing import Any, Optional
from bson import ObjectId
from fastapi.responses import JSONResponse


def serialize_mongo_doc(doc):
    """Recursively convert ObjectIds and datetimes in a MongoDB document."""
    if not doc:
        return doc

    if isinstance(doc, list):
        return [serialize_mongo_doc(d) for d in doc]

    if isinstance(doc, dict):
        clean = {}
        for k, v in doc.items():
            if isinstance(v, ObjectId):
                clean[k] = str(v)
            elif isinstance(v, datetime):
                clean[k] = v.isoformat()
            elif isinstance(v, (dict, list)):
                clean[k] = serialize_mongo_doc(v)
            else:
                clean[k] = v
        return clean

    return doc


def public_user(doc: dict) -> dict:
    """Serialize a user document and strip secrets before it leaves the API."""
    safe = serialize_mongo_doc(dict(doc))
    safe.pop("password", None)
    safe.pop("approval_token", None)
    return safe


def success_response(
    data: Optional[Any] = None,
    message: str = "Success",
    code: int = 200,
) -> JSONResponse:
    """Standard success JSON response."""
    content = {"success": True, "message": message}
    if data is not None:
        content["data"] = data
    return JSONResponse(status_code=code, content=content)


def error_response(
    message: str,
    code: int = 400,
    required: Optional[Any] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """
    Standard rejection JSON response.

    Shape: {"success": false, "message": ..., "required"?: ...}
    """
    content = {"success": False, "message": message}
    if required is not None:
        content["required"] = required
    return JSONResponse(status_code=code, content=content, headers=headers)
