"""Maps integration failures to JSON error responses for the public routes."""
from typing import Any, Dict, Optional
import logging

from fastapi.responses import JSONResponse

from treolan_proxy.integrations.errors import TreolanError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, status_code: int, context: Optional[Dict[str, Any]] = None) -> JSONResponse:
        if isinstance(exc, TreolanError):
            logger.error("Treolan call failed (%s): %s", context or {}, exc)
            message = exc.message
        else:
            logger.error("Unhandled exception in proxy route (%s): %s", context or {}, exc, exc_info=True)
            message = str(exc) or exc.__class__.__name__
        return JSONResponse(status_code=status_code, content={"error": message})


error_handler = ErrorHandler()
