"""
Gateway dependencies

RPC clients are created once per application and kept on ``app.state``.
"""

from fastapi import Request

from shared.rpc.client import RpcClient


def get_auth_client(request: Request) -> RpcClient:
    return request.app.state.auth_client


def get_iam_client(request: Request) -> RpcClient:
    return request.app.state.iam_client


def get_catalog_client(request: Request) -> RpcClient:
    return request.app.state.catalog_client
