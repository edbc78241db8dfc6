import base64

import pytest

from salesassist.errors import FlowNotFoundError
from salesassist.flows import get_flow, list_flows
from salesassist.flows.media import parse_data_uri
from salesassist.flows.product_description import ProductDescriptionInput, generate_product_description
from salesassist.flows.transcription import TranscriptionInput, transcribe_audio
from tests.fakes import FakeGemini, make_client, make_settings


def test_flows_register_on_import():
	names = [flow.name for flow in list_flows()]

	assert names == ["generateProductDescriptionFlow", "transcriptionFlow"]
	assert get_flow("transcriptionFlow").fn is transcribe_audio
	assert get_flow("generateProductDescriptionFlow").input_model is ProductDescriptionInput


def test_unknown_flow():
	with pytest.raises(FlowNotFoundError, match="Unknown flow: pitchFlow"):
		get_flow("pitchFlow")


def test_flow_description_uses_wire_names():
	described = get_flow("transcriptionFlow").describe()

	assert "audioDataUri" in described["inputSchema"]["properties"]
	assert set(described["outputSchema"]["properties"]) == {"diarizedTranscript", "accuracyAssessment"}


def test_parse_data_uri():
	payload = base64.b64encode(b"\x00\x01audio").decode()

	uri = parse_data_uri(f"data:audio/MPEG;base64,{payload}")

	assert uri.mime_type == "audio/mpeg"
	assert uri.data == payload
	assert uri.inline_part() == {"inline_data": {"mime_type": "audio/mpeg", "data": payload}}


def test_parse_data_uri_with_params_and_whitespace():
	payload = base64.b64encode(b"0123456789" * 10).decode()
	wrapped = payload[:40] + "\n" + payload[40:]

	uri = parse_data_uri(f"data:audio/webm;codecs=opus;base64,{wrapped}")

	assert uri.mime_type == "audio/webm"
	assert uri.data == payload


@pytest.mark.parametrize("bad", ["", "audio/wav;base64,AAAA", "data:audio/wav,AAAA", "data:audio/wav;base64,", "data:audio/wav;base64,A"])
def test_parse_data_uri_rejects(bad):
	with pytest.raises(ValueError):
		parse_data_uri(bad)


async def test_transcribe_audio_defaults_missing_assessment():
	gemini = FakeGemini(response={"diarizedTranscript": "Speaker 1: hello"})
	req = TranscriptionInput(audioDataUri="data:audio/ogg;base64," + base64.b64encode(b"ogg").decode())

	result = await transcribe_audio(req, gemini)

	assert result.diarized_transcript == "Speaker 1: hello"
	assert result.accuracy_assessment == "Unknown"
	assert "Roman" in gemini.calls[0]["prompt"][0]["text"]


async def test_generate_product_description_strips_output():
	gemini = FakeGemini(response={"description": "  Reliable home internet.  "})

	result = await generate_product_description(ProductDescriptionInput(productName="FiberMax"), gemini)

	assert result.model_dump(by_alias=True) == {"description": "Reliable home internet."}


def test_flow_listing_endpoint_in_development():
	client = make_client()

	response = client.get("/api/flows")

	assert response.status_code == 200
	assert [f["name"] for f in response.json()["flows"]] == ["generateProductDescriptionFlow", "transcriptionFlow"]


def test_flow_listing_endpoint_hidden_in_production():
	client = make_client(settings=make_settings(APP_ENV="production"))

	assert client.get("/api/flows").status_code == 404
