# Services Module
# GatewayClient is resolved lazily: models import services.money, and the
# client imports models.

__all__ = ["GatewayClient"]


def __getattr__(name):
    if name == "GatewayClient":
        from .payments import GatewayClient
        return GatewayClient
    raise AttributeError(f"module 'esewa_gateway.services' has no attribute '{name}'")
