"""pa_rules REST endpoints.

POST /rules/suggest    suggest an account for an imported transaction
GET  /rules/defaults   default rules resolved against the default chart
"""

from fastapi import APIRouter, Request

from src.pa_common.response import ApiResponse, success_response
from src.pa_rules.application.schemas import SuggestRequest
from src.pa_rules.application.service import RuleApplicationService

router = APIRouter(prefix="/rules", tags=["rules"])

_service = RuleApplicationService()


@router.post("/suggest")
async def suggest(body: SuggestRequest, request: Request) -> ApiResponse:
    result = _service.suggest(body)
    resp = success_response(result.model_dump() if result is not None else None)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/defaults")
async def list_default_rules(request: Request) -> ApiResponse:
    resp = success_response([r.model_dump() for r in _service.default_rules])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
