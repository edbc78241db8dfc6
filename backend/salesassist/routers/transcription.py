from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..deadline import with_deadline
from ..dependencies import get_gemini_client, get_settings, read_json_body, require_provider
from ..errors import error_envelope
from ..flows.transcription import TranscriptionInput, transcribe_audio
from ..gemini_client import GeminiClient
from ..settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transcription", tags=["transcription"])

TRANSCRIPTION_FAILED = "Transcription failed"


@router.post("")
async def transcribe(
	request: Request,
	client: Optional[GeminiClient] = Depends(get_gemini_client),
	settings: Settings = Depends(get_settings),
):
	expose = not settings.is_production
	body = await read_json_body(request)
	try:
		req = TranscriptionInput.model_validate(body)
	except ValidationError as e:
		logger.warning("Transcription input validation failed: %s", e.errors(include_url=False))
		return JSONResponse(status_code=400, content=error_envelope(TRANSCRIPTION_FAILED, e, expose=expose))

	try:
		gemini = require_provider(client, request, "gemini")
		result = await with_deadline(
			transcribe_audio(req, gemini, model=settings.transcription_model),
			settings.provider_timeout_seconds,
			operation="transcription",
			provider="gemini",
		)
	except Exception as e:
		logger.exception("Transcription API error: %s (%s)", e, type(e).__name__)
		return JSONResponse(status_code=500, content=error_envelope(TRANSCRIPTION_FAILED, e, expose=expose))

	return result.model_dump(by_alias=True)


@router.get("")
async def transcription_status(settings: Settings = Depends(get_settings)):
	return {
		"message": "Transcription API is running",
		"status": "healthy",
		"model": settings.transcription_model,
		"maxDurationSeconds": settings.provider_timeout_seconds,
		"googleApiKeyConfigured": bool(settings.gemini_api_key),
	}
