"""Client API"""
from fastapi import APIRouter, Depends

from api.deps import validated
from api.schemas import ClientResponse
from core.validation import NumericParams, RequestContext, ValidationChain, client_exists

router = APIRouter()

get_client_chain = ValidationChain(
    NumericParams(["id"]),
    client_exists(),
    label="clients.get",
)


@router.get("/{id}", response_model=ClientResponse)
async def get_client(ctx: RequestContext = Depends(validated(get_client_chain))):
    return ctx.validated_client
