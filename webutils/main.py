import logging
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI

from .binding import BindError, ValidatingBinder
from .config import Config
from .handlers import default_root_handler, no_content_handler
from .middleware import (
    RemoveTrailingSlashMiddleware,
    bind_error_handler,
    global_exception_handler,
    log_requests,
)
from .models import MessageResponse
from .validation import StructValidator, default_validator


logging.basicConfig(
    level=Config.log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
    ]
)
logger = logging.getLogger(__name__)


def new_app(validator: Optional[StructValidator] = None, **kwargs: Any) -> FastAPI:
    """
    Build a FastAPI app with the shared defaults.

    - validator and validating binder installed on ``app.state``
    - trailing slashes stripped before routing
    - ``GET /`` and ``GET /favicon.ico`` registered
    """
    kwargs.setdefault("title", Config.APP_TITLE)
    kwargs.setdefault("redirect_slashes", False)
    app = FastAPI(**kwargs)

    app.state.validator = validator or default_validator
    app.state.binder = ValidatingBinder(app.state.validator)

    app.add_middleware(RemoveTrailingSlashMiddleware)
    app.middleware("http")(log_requests)
    app.add_exception_handler(BindError, bind_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.add_api_route("/", default_root_handler, methods=["GET"], response_model=MessageResponse)
    app.add_api_route("/favicon.ico", no_content_handler, methods=["GET"], status_code=204, include_in_schema=False)
    return app


app = new_app()


if __name__ == "__main__":
    Config.validate()
    logger.info(f"Starting {Config.APP_TITLE} on {Config.HOST}:{Config.PORT}")
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
