# Importing a flow module registers it; list every flow here.
from . import product_description, transcription
from .registry import FlowDefinition, define_flow, get_flow, list_flows

__all__ = [
	"FlowDefinition",
	"define_flow",
	"get_flow",
	"list_flows",
	"product_description",
	"transcription",
]
