"""pa_ledger REST endpoints.

POST /ledger/transactions/validate   debit/credit totals and balance check
POST /ledger/accounts/balance        signed balance of one account's lines
POST /ledger/trial-balance           trial balance over a chart of accounts
"""

from fastapi import APIRouter, Request

from src.pa_common.response import ApiResponse, success_response
from src.pa_ledger.application.schemas import (
    AccountBalanceRequest,
    TrialBalanceRequest,
    ValidateTransactionRequest,
)
from src.pa_ledger.application.service import LedgerApplicationService

router = APIRouter(prefix="/ledger", tags=["ledger"])

_service = LedgerApplicationService()


@router.post("/transactions/validate")
async def validate_transaction(body: ValidateTransactionRequest, request: Request) -> ApiResponse:
    result = _service.validate_transaction(body)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/accounts/balance")
async def account_balance(body: AccountBalanceRequest, request: Request) -> ApiResponse:
    result = _service.account_balance(body)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/trial-balance")
async def trial_balance(body: TrialBalanceRequest, request: Request) -> ApiResponse:
    result = _service.trial_balance(body)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
