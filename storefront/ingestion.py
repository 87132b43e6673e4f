# storefront/ingestion.py

"""Normalization of admin product submissions.

Two encodings reach ``POST /products``:

* structured JSON, every field typed and ``image`` already a URI;
* form fields (multipart or urlencoded, all strings) plus an optional
  image file.

Both are reduced to one :class:`ProductIn` before the catalog store sees
them. Non-numeric ``price`` or ``stock`` in a form is rejected with a
validation error, before any upload happens.
"""

import logging
import time
from typing import Any, Mapping, Optional

from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from .errors import ValidationFailure
from .models import ProductIn

logger = logging.getLogger(__name__)

FORM_TEXT_FIELDS = ("name", "category", "subcategory", "unit", "description")


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts) or "Invalid product data"


def _parse_number(fields: Mapping[str, Any], name: str, cast):
    raw = fields.get(name)
    if raw is None or str(raw).strip() == "":
        raise ValidationFailure(f"{name} is required")
    try:
        return cast(str(raw).strip())
    except ValueError:
        kind = "an integer" if cast is int else "a number"
        raise ValidationFailure(f"{name} must be {kind}, got {raw!r}")


def image_object_name(filename: str) -> str:
    return f"{int(time.time() * 1000)}-{filename}"


def from_json(payload: Any) -> ProductIn:
    if not isinstance(payload, dict):
        raise ValidationFailure("Product payload must be a JSON object")
    try:
        return ProductIn.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailure(_validation_message(e))


async def from_form(fields: Mapping[str, Any], blob_sink) -> ProductIn:
    data = {}
    for name in FORM_TEXT_FIELDS:
        value = fields.get(name)
        if value is not None and not isinstance(value, UploadFile):
            data[name] = value
    data["price"] = _parse_number(fields, "price", float)
    data["stock"] = _parse_number(fields, "stock", int)

    # Validate before uploading so a bad form never leaves an orphan image
    try:
        product = ProductIn.model_validate({**data, "image": ""})
    except ValidationError as e:
        raise ValidationFailure(_validation_message(e))

    image: Optional[UploadFile] = fields.get("image")
    if isinstance(image, UploadFile) and image.filename:
        content = await image.read()
        name = image_object_name(image.filename)
        url = await blob_sink.upload(name, content, image.content_type or "application/octet-stream")
        product = product.model_copy(update={"image": url})
        logger.info("Uploaded image %s for %s", name, product.name)
    return product


async def normalize(request, blob_sink) -> ProductIn:
    """Read a ``POST /products`` request body into a creation payload."""
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationFailure("Request body is not valid JSON")
        return from_json(payload)
    if "multipart/form-data" in content_type or "application/x-www-form-urlencoded" in content_type:
        try:
            form = await request.form()
        except HTTPException as e:
            raise ValidationFailure(e.detail)
        return await from_form(form, blob_sink)
    raise ValidationFailure(f"Unsupported content type: {content_type or 'none'}")
