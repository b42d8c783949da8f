"""
Real HTTP integration clients.

These clients communicate with the Treolan B2B API over HTTP:
- token_manager: login exchange and token cache
- treolan: authenticated calls with one re-authentication on 401

Switching:
Clients are created in treolan_proxy/api/main.py only.
"""
