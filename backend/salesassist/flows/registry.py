from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Type

from pydantic import BaseModel

from ..errors import FlowNotFoundError

logger = logging.getLogger(__name__)

FlowFn = Callable[..., Awaitable[BaseModel]]


@dataclass(frozen=True)
class FlowDefinition:
	name: str
	input_model: Type[BaseModel]
	output_model: Type[BaseModel]
	fn: FlowFn

	def describe(self) -> Dict[str, Any]:
		return {
			"name": self.name,
			"inputSchema": self.input_model.model_json_schema(),
			"outputSchema": self.output_model.model_json_schema(),
		}


_FLOWS: Dict[str, FlowDefinition] = {}


def define_flow(name: str, *, input_model: Type[BaseModel], output_model: Type[BaseModel]) -> Callable[[FlowFn], FlowFn]:
	"""Register the decorated coroutine function under `name`.

	Registration happens at import time; re-importing a module replaces the
	previous entry rather than duplicating it.
	"""
	def decorator(fn: FlowFn) -> FlowFn:
		_FLOWS[name] = FlowDefinition(name=name, input_model=input_model, output_model=output_model, fn=fn)
		logger.debug("Registered flow %s", name)
		return fn
	return decorator


def get_flow(name: str) -> FlowDefinition:
	try:
		return _FLOWS[name]
	except KeyError:
		raise FlowNotFoundError(name) from None


def list_flows() -> List[FlowDefinition]:
	return [_FLOWS[name] for name in sorted(_FLOWS)]
