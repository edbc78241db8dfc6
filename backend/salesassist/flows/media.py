from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any, Dict

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[\w.+-]+=[^;,]*)*);base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class DataUri:
	mime_type: str
	data: str

	def inline_part(self) -> Dict[str, Any]:
		return {"inline_data": {"mime_type": self.mime_type, "data": self.data}}


def parse_data_uri(uri: str) -> DataUri:
	"""Split a `data:<mime>;base64,<payload>` URI into mime type and payload.

	Raises ValueError when the URI is not base64 encoded or the payload is empty
	or does not decode.
	"""
	match = _DATA_URI_RE.match((uri or "").strip())
	if not match:
		raise ValueError("Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")
	data = re.sub(r"\s+", "", match.group("data"))
	if not data:
		raise ValueError("Data URI has an empty payload")
	try:
		base64.b64decode(data, validate=True)
	except binascii.Error as e:
		raise ValueError(f"Data URI payload is not valid base64: {e}") from e
	return DataUri(mime_type=match.group("mime").lower(), data=data)
