import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import httpx
import pytest

from salesassist.deadline import with_deadline
from salesassist.errors import EmptyResultError, ProviderError, ProviderNotConfiguredError
from salesassist.gemini_client import GeminiClient, extract_json_block
from tests.fakes import make_settings


def _candidate(text):
	return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(handler, **overrides):
	transport = httpx.MockTransport(handler)
	return GeminiClient(settings=make_settings(**overrides), http_client=httpx.AsyncClient(transport=transport))


async def test_generate_posts_to_ai_studio_with_key_param():
	seen = {}

	def handler(request):
		seen["url"] = request.url
		seen["body"] = json.loads(request.content)
		return httpx.Response(200, json=_candidate("hello"))

	client = _client(handler)
	text = await client.generate("Say hello", temperature=0.2)
	await client.aclose()

	assert text == "hello"
	assert seen["url"].host == "generativelanguage.googleapis.com"
	assert seen["url"].path == "/v1beta/models/gemini-2.0-flash:generateContent"
	assert seen["url"].params["key"] == "test-gemini-key-0000"
	assert seen["body"]["contents"][0]["parts"][0]["text"] == "Say hello"
	assert seen["body"]["generationConfig"] == {"temperature": 0.2}


async def test_vertex_provider_uses_header_auth():
	seen = {}

	def handler(request):
		seen["url"] = request.url
		seen["headers"] = request.headers
		return httpx.Response(200, json=_candidate("ok"))

	client = _client(handler, GEMINI_PROVIDER="vertex", GEMINI_VERTEX_PROJECT="sales-proj")
	await client.generate("hi")

	assert seen["url"].host == "us-central1-aiplatform.googleapis.com"
	assert "/projects/sales-proj/" in seen["url"].path
	assert "key" not in seen["url"].params
	assert seen["headers"]["x-goog-api-key"] == "test-gemini-key-0000"


async def test_generate_json_requests_json_and_parses():
	seen = {}

	def handler(request):
		seen["body"] = json.loads(request.content)
		return httpx.Response(200, json=_candidate('```json\n{"description": "Great"}\n```'))

	client = _client(handler)
	data = await client.generate_json([{"text": "describe"}], model="gemini-1.5-pro")

	assert data == {"description": "Great"}
	assert seen["body"]["contents"][0]["role"] == "user"
	assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"


async def test_model_override_changes_endpoint():
	seen = {}

	def handler(request):
		seen["path"] = request.url.path
		return httpx.Response(200, json=_candidate("ok"))

	client = _client(handler)
	await client.generate("hi", model="gemini-1.5-pro")

	assert seen["path"].endswith("/models/gemini-1.5-pro:generateContent")


async def test_http_error_maps_to_provider_error():
	def handler(request):
		return httpx.Response(429, json={"error": {"message": "quota exceeded"}})

	client = _client(handler)
	with pytest.raises(ProviderError) as exc:
		await client.generate("hi")

	assert "429" in str(exc.value)
	assert "quota exceeded" in str(exc.value)


async def test_network_error_maps_to_provider_error():
	def handler(request):
		raise httpx.ConnectError("connection refused", request=request)

	client = _client(handler)
	with pytest.raises(ProviderError, match="connection refused"):
		await client.generate("hi")


async def test_unexpected_shape_maps_to_provider_error():
	client = _client(lambda request: httpx.Response(200, json={"candidates": []}))

	with pytest.raises(ProviderError, match="Unexpected Gemini response"):
		await client.generate("hi")


async def test_blank_text_is_empty_result():
	client = _client(lambda request: httpx.Response(200, json=_candidate("  ")))

	with pytest.raises(EmptyResultError):
		await client.generate("hi")


def test_missing_api_key_is_not_configured():
	with pytest.raises(ProviderNotConfiguredError, match="GEMINI_API_KEY"):
		GeminiClient(settings=make_settings(GEMINI_API_KEY=None))


def test_extract_json_block():
	assert extract_json_block('{"a": 1}') == {"a": 1}
	assert extract_json_block('Sure! Here it is: {"a": {"b": 2}} done') == {"a": {"b": 2}}
	with pytest.raises(ProviderError):
		extract_json_block("no json here")
	with pytest.raises(ProviderError):
		extract_json_block("[1, 2, 3]")


class _GenerateContentHandler(BaseHTTPRequestHandler):
	def do_POST(self):
		self.rfile.read(int(self.headers.get("Content-Length", 0)))
		body = json.dumps(_candidate("hello")).encode()
		self.send_response(200)
		self.send_header("Content-Type", "application/json")
		self.send_header("Content-Length", str(len(body)))
		self.end_headers()
		self.wfile.write(body)

	def log_message(self, format, *args):
		pass


@pytest.fixture
def local_gemini_url():
	server = ThreadingHTTPServer(("127.0.0.1", 0), _GenerateContentHandler)
	thread = threading.Thread(target=server.serve_forever, daemon=True)
	thread.start()
	yield f"http://127.0.0.1:{server.server_address[1]}/v1beta/models/gemini-2.0-flash:generateContent"
	server.shutdown()
	server.server_close()


@pytest.mark.parametrize("timeout", [0, -1, 300])
async def test_disabled_deadline_leaves_http_calls_unbounded(local_gemini_url, timeout):
	settings = make_settings(PROVIDER_TIMEOUT_SECONDS=timeout)
	client = GeminiClient(settings=settings, base_url=local_gemini_url)
	try:
		text = await with_deadline(
			client.generate("Say hello"),
			settings.provider_timeout_seconds,
			operation="generation",
		)
	finally:
		await client.aclose()

	assert text == "hello"
