import json

from treolan_proxy.error_handler import ErrorHandler
from treolan_proxy.integrations.errors import UpstreamError


def test_handle_exception_returns_json_error():
    eh = ErrorHandler()
    out = eh.handle_exception(UpstreamError(503, "down"), 500, context={"route": "catalog"})
    assert out.status_code == 500
    assert json.loads(out.body) == {"error": "Treolan 503: down"}


def test_handle_exception_unexpected_error_uses_message():
    out = ErrorHandler().handle_exception(RuntimeError("boom"), 404)
    assert out.status_code == 404
    assert json.loads(out.body) == {"error": "boom"}
