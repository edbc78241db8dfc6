from __future__ import annotations
import json
import re
import httpx
from typing import Any, Dict, List, Optional
from .errors import EmptyResultError, ProviderError, ProviderNotConfiguredError
from .settings import Settings, settings as default_settings

PROVIDER = "gemini"


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		settings: Optional[Settings] = None,
		http_client: Optional[httpx.AsyncClient] = None,
	) -> None:
		cfg = settings or default_settings
		self.api_key = api_key or cfg.gemini_api_key
		if not self.api_key:
			raise ProviderNotConfiguredError("GEMINI_API_KEY is not configured", provider=PROVIDER)
		self.model = model or cfg.gemini_model
		self.provider = cfg.gemini_provider
		self._region = cfg.vertex_region
		self._project = cfg.vertex_project or "placeholder-project"
		self._base_url_override = base_url
		self._auth_in_query = self.provider != "vertex"
		# A non-positive deadline disables the ceiling, for httpx as well
		timeout = cfg.provider_timeout_seconds if cfg.provider_timeout_seconds > 0 else None
		self._client = http_client or httpx.AsyncClient(timeout=timeout)

	def endpoint(self, model: Optional[str] = None) -> str:
		if self._base_url_override:
			return self._base_url_override
		model = model or self.model
		if self.provider == "vertex":
			# Vertex AI Generative REST endpoint (API key via header)
			return (
				f"https://{self._region}-aiplatform.googleapis.com/v1/projects/{self._project}"
				f"/locations/{self._region}/publishers/google/models/{model}:generateContent"
			)
		# Google AI Studio (Generative Language API)
		return f"https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

	async def generate(
		self,
		prompt: str,
		*,
		model: Optional[str] = None,
		temperature: Optional[float] = None,
		json_output: bool = False,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		return await self._post_payload(payload, model=model, temperature=temperature, json_output=json_output)

	async def generate_multimodal(
		self,
		parts: List[Dict[str, Any]],
		*,
		role: str = "user",
		model: Optional[str] = None,
		temperature: Optional[float] = None,
		json_output: bool = False,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"role": role, "parts": parts}]}
		return await self._post_payload(payload, model=model, temperature=temperature, json_output=json_output)

	async def generate_json(
		self,
		prompt_or_parts: str | List[Dict[str, Any]],
		*,
		model: Optional[str] = None,
		temperature: Optional[float] = None,
	) -> Dict[str, Any]:
		"""Ask for a JSON response and return the decoded object."""
		if isinstance(prompt_or_parts, str):
			raw = await self.generate(prompt_or_parts, model=model, temperature=temperature, json_output=True)
		else:
			raw = await self.generate_multimodal(prompt_or_parts, model=model, temperature=temperature, json_output=True)
		return extract_json_block(raw)

	async def _post_payload(
		self,
		payload: Dict[str, Any],
		*,
		model: Optional[str] = None,
		temperature: Optional[float] = None,
		json_output: bool = False,
	) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		generation_config: Dict[str, Any] = {}
		if temperature is not None:
			generation_config["temperature"] = temperature
		if json_output:
			generation_config["responseMimeType"] = "application/json"
		if generation_config:
			payload = {**payload, "generationConfig": generation_config}
		try:
			r = await self._client.post(self.endpoint(model), params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise ProviderError(
				f"Gemini returned HTTP {http_err.response.status_code}: {_error_message(http_err.response)}",
				provider=PROVIDER,
			) from http_err
		except httpx.RequestError as net_err:
			raise ProviderError(f"Gemini request failed: {net_err}", provider=PROVIDER) from net_err
		try:
			data = r.json()
			text = data["candidates"][0]["content"]["parts"][0]["text"]
		except (ValueError, KeyError, IndexError, TypeError) as e:
			raise ProviderError(f"Unexpected Gemini response: {r.text[:500]}", provider=PROVIDER) from e
		if not text or not text.strip():
			raise EmptyResultError("Gemini returned an empty response", provider=PROVIDER)
		return text

	async def aclose(self) -> None:
		await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
	try:
		return response.json()["error"]["message"]
	except Exception:
		return response.text[:500]


def extract_json_block(text: str) -> Dict[str, Any]:
	"""Extract a JSON object from LLM response text.

	Attempts to parse the entire text as JSON first, then searches for the first
	JSON object (models sometimes wrap it in a markdown fence).

	Raises:
		ProviderError: If no JSON object can be extracted from the text
	"""
	try:
		data = json.loads(text)
		if isinstance(data, dict):
			return data
	except ValueError:
		pass
	match = re.search(r"\{[\s\S]*\}", text)
	if match:
		try:
			data = json.loads(match.group(0))
			if isinstance(data, dict):
				return data
		except ValueError:
			pass
	raise ProviderError("Gemini response did not contain a JSON object", provider=PROVIDER)
