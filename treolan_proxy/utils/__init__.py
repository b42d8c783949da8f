"""
Utility modules for the Treolan proxy
"""
from .config_loader import ProxyConfig, load_proxy_config

__all__ = [
    'ProxyConfig',
    'load_proxy_config',
]
