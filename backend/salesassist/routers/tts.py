from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError, field_validator

from ..deadline import with_deadline
from ..dependencies import get_settings, get_synthesizer, read_json_body, require_provider
from ..settings import Settings
from ..tts_client import SpeechSynthesizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tts", tags=["tts"])

TEXT_REQUIRED = "Text to speak is required."
NO_AUDIO = "No audio content received"
SYNTHESIS_FAILED = "Failed to synthesize speech."


class SpeechRequest(BaseModel):
	text: str
	voice: Optional[str] = None

	@field_validator("text")
	@classmethod
	def _text_not_blank(cls, value: str) -> str:
		if not value.strip():
			raise ValueError("text must not be empty")
		return value

	@field_validator("voice", mode="before")
	@classmethod
	def _blank_voice_is_default(cls, value: Any) -> Optional[str]:
		# Anything but a non-blank string selects the default voice
		if not isinstance(value, str):
			return None
		return value.strip() or None


class SpeechResponse(BaseModel):
	audioContent: str


@router.post("", response_model=SpeechResponse)
async def synthesize(
	request: Request,
	synthesizer: Optional[SpeechSynthesizer] = Depends(get_synthesizer),
	settings: Settings = Depends(get_settings),
):
	body = await read_json_body(request)
	try:
		req = SpeechRequest.model_validate(body if isinstance(body, dict) else {})
	except ValidationError as e:
		logger.info("Rejected TTS request: %s", e.errors(include_url=False))
		return JSONResponse(status_code=400, content={"error": TEXT_REQUIRED})

	try:
		tts = require_provider(synthesizer, request, "synthesizer")
		audio = await with_deadline(
			tts.synthesize(req.text, req.voice),
			settings.provider_timeout_seconds,
			operation="speech synthesis",
			provider="google-tts",
		)
	except Exception as e:
		logger.exception("Speech synthesis failed: %s", e)
		return JSONResponse(status_code=500, content={"error": SYNTHESIS_FAILED, "details": str(e)})

	if not audio:
		logger.error("Speech synthesis returned no audio for voice %s", req.voice or tts.default_voice)
		return JSONResponse(status_code=500, content={"error": NO_AUDIO})

	return SpeechResponse(audioContent=base64.b64encode(audio).decode("ascii"))


@router.get("")
async def tts_status(
	request: Request,
	synthesizer: Optional[SpeechSynthesizer] = Depends(get_synthesizer),
):
	if synthesizer is None:
		message = getattr(request.app.state, "synthesizer_error", None) or "TTS service is NOT configured."
		return JSONResponse(status_code=500, content={"status": "error", "message": message})
	return {
		"status": "ok",
		"message": "TTS service is configured and client is initialized.",
		"defaultVoice": synthesizer.default_voice,
	}
