from fastapi import Request

from treolan_proxy.integrations.clients.real_http.treolan import TreolanGateway
from treolan_proxy.utils.config_loader import ProxyConfig


def get_config(request: Request) -> ProxyConfig:
    return request.app.state.config


def get_gateway(request: Request) -> TreolanGateway:
    return request.app.state.gateway
