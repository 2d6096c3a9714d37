from fastapi import APIRouter, Depends

from shared.rpc.client import RpcClient
from shared.security.guards import AuthenticatedUser, get_current_user

from api_gateway.dependencies import get_auth_client
from api_gateway.schemas import LoginRequest, RefreshTokenRequest, RegisterRequest

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post("/login")
async def login(body: LoginRequest, auth: RpcClient = Depends(get_auth_client)):
    return await auth.send("auth.login", body.to_rpc())


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, auth: RpcClient = Depends(get_auth_client)):
    return await auth.send("auth.register", body.to_rpc())


@router.post("/refresh")
async def refresh(body: RefreshTokenRequest, auth: RpcClient = Depends(get_auth_client)):
    return await auth.send("auth.refresh_token", body.to_rpc())


@router.post("/logout")
async def logout(body: RefreshTokenRequest, auth: RpcClient = Depends(get_auth_client)):
    return await auth.send("auth.logout", body.to_rpc())


@router.get("/me")
async def me(
    user: AuthenticatedUser = Depends(get_current_user),
    auth: RpcClient = Depends(get_auth_client),
):
    return await auth.send("auth.get_user", {"id": user.id})
