from shared.rpc.client import RpcClient
from shared.rpc.server import RpcRouter

__all__ = ["RpcClient", "RpcRouter"]
