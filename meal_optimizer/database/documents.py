from datetime import datetime

from bson import ObjectId


def convert_objectids_to_strings(data):
    """Convert MongoDB ObjectIds (and datetimes) in a document to JSON-friendly values"""
    if isinstance(data, dict):
        return {key: convert_objectids_to_strings(value) for key, value in data.items()}
    if isinstance(data, list):
        return [convert_objectids_to_strings(item) for item in data]
    if isinstance(data, ObjectId):
        return str(data)
    if isinstance(data, datetime):
        return data.isoformat()
    return data


def plan_to_response(doc: dict) -> dict:
    """Public shape of a stored weekly plan (``_id`` exposed as ``id``)"""
    out = convert_objectids_to_strings(doc)
    out["id"] = out.pop("_id", None)
    return out
