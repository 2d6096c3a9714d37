from fastapi import APIRouter, Depends

from shared.rpc.client import RpcClient
from shared.security.guards import require_roles

from api_gateway.dependencies import get_iam_client
from api_gateway.schemas import AssignRolesRequest

router = APIRouter(
    prefix="/api/v1/iam",
    tags=["IAM"],
    dependencies=[Depends(require_roles("ADMIN"))],
)


@router.get("/users")
async def list_users(iam: RpcClient = Depends(get_iam_client)):
    return await iam.send("iam.user.list")


@router.get("/users/{user_id}")
async def get_user(user_id: str, iam: RpcClient = Depends(get_iam_client)):
    return await iam.send("iam.user.find_by_id", {"id": user_id})


@router.post("/users/{user_id}/roles")
async def assign_roles(user_id: str, body: AssignRolesRequest, iam: RpcClient = Depends(get_iam_client)):
    return await iam.send("iam.user.assign_roles", {"id": user_id, **body.to_rpc()})
