from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..deadline import with_deadline
from ..dependencies import get_gemini_client, get_settings, read_json_body, require_provider
from ..flows.product_description import ProductDescriptionInput, generate_product_description
from ..gemini_client import GeminiClient
from ..settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/product-description", tags=["product-description"])

GENERATION_FAILED = "Product description generation failed"


@router.post("")
async def product_description(
	request: Request,
	client: Optional[GeminiClient] = Depends(get_gemini_client),
	settings: Settings = Depends(get_settings),
):
	body = await read_json_body(request)
	try:
		req = ProductDescriptionInput.model_validate(body)
	except ValidationError as e:
		logger.warning("Product description input rejected: %s", e.errors(include_url=False))
		return JSONResponse(status_code=400, content={"error": GENERATION_FAILED})

	try:
		gemini = require_provider(client, request, "gemini")
		result = await with_deadline(
			generate_product_description(req, gemini),
			settings.provider_timeout_seconds,
			operation="product description generation",
			provider="gemini",
		)
	except Exception:
		logger.exception("Product Description API error")
		return JSONResponse(status_code=500, content={"error": GENERATION_FAILED})

	return result.model_dump(by_alias=True)
