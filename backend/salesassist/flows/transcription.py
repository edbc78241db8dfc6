"""Audio transcription with speaker diarization and an accuracy assessment."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import EmptyResultError
from ..gemini_client import GeminiClient
from .media import parse_data_uri
from .registry import define_flow

logger = logging.getLogger(__name__)


class TranscriptionInput(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	audio_data_uri: str = Field(
		alias="audioDataUri",
		description="An audio file as a data URI with a MIME type and base64 payload: 'data:<mimetype>;base64,<encoded_data>'.",
	)

	@field_validator("audio_data_uri")
	@classmethod
	def _check_data_uri(cls, value: str) -> str:
		uri = parse_data_uri(value)
		if not uri.mime_type.startswith(("audio/", "video/")):
			raise ValueError(f"Unsupported media type for transcription: {uri.mime_type}")
		return value


class TranscriptionOutput(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	diarized_transcript: str = Field(
		alias="diarizedTranscript",
		description="The complete transcript formatted as a script with speaker labels (e.g. 'Agent: ...', 'User: ...').",
	)
	accuracy_assessment: str = Field(
		alias="accuracyAssessment",
		description="Qualitative accuracy assessment, e.g. 'High' or 'Medium due to background noise'.",
	)


def _build_transcription_prompt() -> str:
	return (
		"You are an expert transcriptionist for sales and support phone calls.\n"
		"Transcribe the attached audio COMPLETELY, from the first word to the last. Do not summarize or skip any part.\n"
		"Format the transcript as a script with one line per turn and speaker labels: use 'Agent:' and 'User:' when the roles are clear, otherwise 'Speaker 1:', 'Speaker 2:' and so on.\n"
		"The transcript MUST use English (Roman) script. Transliterate Hindi or Hinglish speech into Roman script (e.g. 'aap kaise hain'), do not translate it.\n"
		"Mark unintelligible segments as [inaudible].\n\n"
		"Also give a short qualitative assessment of the transcript's accuracy (e.g. 'High', 'Medium due to background noise', 'Low due to overlapping speech').\n\n"
		"Return ONLY a JSON object with keys: diarizedTranscript (string), accuracyAssessment (string)."
	)


@define_flow("transcriptionFlow", input_model=TranscriptionInput, output_model=TranscriptionOutput)
async def transcribe_audio(
	input: TranscriptionInput,
	client: GeminiClient,
	*,
	model: Optional[str] = None,
) -> TranscriptionOutput:
	audio = parse_data_uri(input.audio_data_uri)
	parts = [
		{"text": _build_transcription_prompt()},
		audio.inline_part(),
	]
	logger.info("Transcribing %s audio (%d base64 chars)", audio.mime_type, len(audio.data))
	data = await client.generate_json(parts, model=model)
	transcript = str(data.get("diarizedTranscript") or "").strip()
	if not transcript:
		raise EmptyResultError("AI failed to produce a transcript.", provider="gemini")
	assessment = str(data.get("accuracyAssessment") or "").strip() or "Unknown"
	return TranscriptionOutput(diarized_transcript=transcript, accuracy_assessment=assessment)
