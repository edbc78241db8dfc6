from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from .errors import ProviderTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_deadline(
	awaitable: Awaitable[T],
	timeout: Optional[float],
	*,
	operation: str,
	provider: Optional[str] = None,
) -> T:
	"""Await a provider call, raising ProviderTimeoutError once `timeout` seconds pass.

	A timeout of None or <= 0 disables the deadline.
	"""
	if timeout is None or timeout <= 0:
		return await awaitable
	try:
		return await asyncio.wait_for(awaitable, timeout=timeout)
	except asyncio.TimeoutError as e:
		logger.warning("%s exceeded deadline of %ss", operation, timeout)
		raise ProviderTimeoutError(operation, timeout, provider=provider) from e
