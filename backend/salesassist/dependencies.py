"""Provider clients are built once in the lifespan and stored on `app.state`.

The getters return None instead of raising so each route can turn a missing
client into its own error envelope; tests replace them through
`app.dependency_overrides`.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import Request

from .errors import ProviderNotConfiguredError
from .gemini_client import GeminiClient
from .settings import Settings
from .tts_client import SpeechSynthesizer


def get_settings(request: Request) -> Settings:
	return request.app.state.settings


def get_gemini_client(request: Request) -> Optional[GeminiClient]:
	return getattr(request.app.state, "gemini", None)


def get_synthesizer(request: Request) -> Optional[SpeechSynthesizer]:
	return getattr(request.app.state, "synthesizer", None)


async def read_json_body(request: Request) -> Any:
	"""Decoded JSON body, or None when the body is empty or not JSON."""
	try:
		return await request.json()
	except ValueError:
		return None


def require_provider(client: Any, request: Request, name: str) -> Any:
	"""Return `client`, or raise the configuration error recorded at startup."""
	if client is not None:
		return client
	reason = getattr(request.app.state, f"{name}_error", None)
	raise ProviderNotConfiguredError(reason or f"{name} client is not configured", provider=name)
