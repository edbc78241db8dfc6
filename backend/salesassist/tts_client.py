"""Google Cloud Text-to-Speech wrapper.

The SDK client is created once at startup and handed to the TTS route; the
route only sees `SpeechSynthesizer.synthesize`, so tests can swap in a fake.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Any, Dict, Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud import texttospeech
from google.oauth2 import service_account

from .errors import ProviderError, ProviderNotConfiguredError
from .settings import Settings

logger = logging.getLogger(__name__)

PROVIDER = "google-tts"

# "en-IN-Standard-A" -> "en-IN"; "cmn-CN-Wavenet-A" -> "cmn-CN"
_LOCALE_RE = re.compile(r"^([a-z]{2,3}-[A-Z]{2})-")


def language_code_for(voice: str, fallback: str) -> str:
	match = _LOCALE_RE.match(voice or "")
	if match:
		return match.group(1)
	return fallback


def load_service_account_info(encoded: str) -> Dict[str, Any]:
	"""Decode a base64 service account JSON blob."""
	try:
		decoded = base64.b64decode(encoded, validate=True)
		info = json.loads(decoded)
	except (binascii.Error, ValueError) as e:
		raise ProviderNotConfiguredError(
			"GOOGLE_SERVICE_ACCOUNT_BASE64 is not a valid base64-encoded JSON string",
			provider=PROVIDER,
		) from e
	if not isinstance(info, dict):
		raise ProviderNotConfiguredError(
			"GOOGLE_SERVICE_ACCOUNT_BASE64 does not contain a JSON object",
			provider=PROVIDER,
		)
	return info


class SpeechSynthesizer:
	def __init__(self, client: Any, *, default_voice: str, language_code: str) -> None:
		self._client = client
		self.default_voice = default_voice
		self.language_code = language_code

	@classmethod
	def from_settings(cls, settings: Settings) -> "SpeechSynthesizer":
		if settings.google_service_account_base64:
			info = load_service_account_info(settings.google_service_account_base64)
			credentials = service_account.Credentials.from_service_account_info(info)
			client = texttospeech.TextToSpeechAsyncClient(credentials=credentials)
		else:
			# Application default credentials (GOOGLE_APPLICATION_CREDENTIALS, metadata server)
			client = texttospeech.TextToSpeechAsyncClient()
		return cls(client, default_voice=settings.tts_default_voice, language_code=settings.tts_language_code)

	def voice_params(self, voice: Optional[str] = None) -> Dict[str, str]:
		name = voice or self.default_voice
		return {"languageCode": language_code_for(name, self.language_code), "name": name}

	async def synthesize(self, text: str, voice: Optional[str] = None) -> bytes:
		"""Return MP3 bytes for `text`. Empty bytes mean the provider sent no audio."""
		params = self.voice_params(voice)
		request = texttospeech.SynthesizeSpeechRequest(
			input=texttospeech.SynthesisInput(text=text),
			voice=texttospeech.VoiceSelectionParams(
				language_code=params["languageCode"],
				name=params["name"],
			),
			audio_config=texttospeech.AudioConfig(audio_encoding=texttospeech.AudioEncoding.MP3),
		)
		try:
			response = await self._client.synthesize_speech(request=request)
		except GoogleAPIError as e:
			raise ProviderError(str(e), provider=PROVIDER) from e
		return bytes(response.audio_content or b"")

	async def aclose(self) -> None:
		transport = getattr(self._client, "transport", None)
		if transport is not None:
			await transport.close()
