from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import flows
from .gemini_client import GeminiClient
from .logging_setup import mask_secret, setup_logging
from .routers import flows as flows_router
from .routers import health, product_description, transcription, tts
from .settings import Settings, settings as default_settings
from .tts_client import SpeechSynthesizer

logger = logging.getLogger(__name__)


def _build_providers(app: FastAPI, settings: Settings) -> None:
	app.state.gemini = None
	app.state.gemini_error = None
	app.state.synthesizer = None
	app.state.synthesizer_error = None
	logger.info("Reading GEMINI_API_KEY: %s", mask_secret(settings.gemini_api_key))
	try:
		app.state.gemini = GeminiClient(settings=settings)
	except Exception as e:
		app.state.gemini_error = f"Gemini client not initialized: {e}"
		logger.error("%s. AI flows (transcription, product description) will fail.", app.state.gemini_error)
	try:
		app.state.synthesizer = SpeechSynthesizer.from_settings(settings)
	except Exception as e:
		app.state.synthesizer_error = f"TTS client failed to initialize: {e}"
		logger.error(app.state.synthesizer_error)


async def _close_providers(app: FastAPI) -> None:
	for name in ("gemini", "synthesizer"):
		client = getattr(app.state, name, None)
		if client is None:
			continue
		try:
			await client.aclose()
		except Exception:
			logger.warning("Failed to close %s client", name, exc_info=True)
		setattr(app.state, name, None)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
	settings = settings or default_settings

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		setup_logging(settings.log_level)
		_build_providers(app, settings)
		logger.info("Registered flows: %s", ", ".join(f.name for f in flows.list_flows()))
		yield
		await _close_providers(app)

	app = FastAPI(title="SalesAssist AI API", lifespan=lifespan)
	app.state.settings = settings
	app.include_router(health.router)
	app.include_router(tts.router)
	app.include_router(transcription.router)
	app.include_router(product_description.router)
	if not settings.is_production:
		app.include_router(flows_router.router)

	@app.exception_handler(Exception)
	async def unhandled_error(request: Request, exc: Exception):
		logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
		return JSONResponse(status_code=500, content={"error": "An unexpected error occurred"})

	return app


app = create_app()
