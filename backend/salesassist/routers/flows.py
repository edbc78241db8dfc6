from fastapi import APIRouter

from ..flows import list_flows

router = APIRouter(prefix="/api/flows", tags=["flows"])


@router.get("")
def registered_flows():
	# Local inspection only; main.py skips this router in production
	return {"flows": [flow.describe() for flow in list_flows()]}
