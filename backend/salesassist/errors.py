"""Error kinds raised by the provider clients and flows.

Routes catch everything at their boundary; these classes only decide which
envelope and log line a failure gets.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SalesAssistError(Exception):
	"""Base class for errors raised inside this service."""


class ProviderError(SalesAssistError):
	"""An external AI or speech provider call failed."""

	def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		self.provider = provider


class ProviderTimeoutError(ProviderError):
	"""The per-call deadline expired before the provider answered."""

	def __init__(self, operation: str, timeout: float, *, provider: Optional[str] = None) -> None:
		super().__init__(f"{operation} did not complete within {timeout:g}s", provider=provider)
		self.operation = operation
		self.timeout = timeout


class EmptyResultError(ProviderError):
	"""The provider answered but the payload was empty."""


class ProviderNotConfiguredError(ProviderError):
	"""Credentials for a provider are missing or unreadable."""


class FlowNotFoundError(SalesAssistError, KeyError):
	def __init__(self, name: str) -> None:
		super().__init__(name)
		self.name = name

	def __str__(self) -> str:
		return f"Unknown flow: {self.name}"


def error_details(exc: BaseException) -> Dict[str, Any]:
	# Message and classification name only; never the traceback
	return {"message": str(exc), "type": type(exc).__name__}


def error_envelope(message: str, exc: Optional[BaseException] = None, *, expose: bool = False) -> Dict[str, Any]:
	body: Dict[str, Any] = {"error": message}
	if expose and exc is not None:
		body["details"] = error_details(exc)
	return body
