#   Copyright 2026 UCP Authors
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.

"""Web Payments Demo Server (Python/FastAPI)."""

import logging
import os
from typing import Sequence

from absl import app as absl_app
import config
from dotenv import load_dotenv
from exceptions import CheckoutError
from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from routes.checkout import router as checkout_router
from routes.discovery import router as discovery_router
import uvicorn

# --- App Setup ---

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(static_dir: str | None = None) -> FastAPI:
  """Creates the FastAPI application.

  Args:
    static_dir: Directory with the checkout page. It is served at `/` when it
      exists.

  Returns:
    The application.
  """
  application = FastAPI(
      title="Web Payments Demo",
      version=config.SERVER_VERSION,
      description="Payment Request checkout with shipping and authorization",
  )

  @application.exception_handler(CheckoutError)
  async def checkout_exception_handler(request: Request, exc: CheckoutError):
    """Converts checkout exceptions to fail envelopes."""
    del request  # Unused.
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "fail", "message": exc.message},
    )

  application.include_router(checkout_router)
  application.include_router(discovery_router)

  # Mounted last so the API routes take precedence.
  if static_dir and os.path.isdir(static_dir):
    application.mount(
        "/", StaticFiles(directory=static_dir, html=True), name="public"
    )
  elif static_dir:
    logger.warning("Static directory %s not found, not serving it", static_dir)

  return application


app = create_app(str(config.DEFAULT_STATIC_DIR))


def main(argv: Sequence[str]) -> None:
  """Main entry point for the Web Payments Demo Server."""
  del argv  # Unused.

  settings = config.load_settings()
  if not settings.shipping.api_key or not settings.payment.api_key:
    logger.warning(
        "SHIPPO_API_KEY or STRIPE_API_KEY is not set; shipping and payment"
        " calls will fail."
    )

  server_app = app
  if settings.static_dir != str(config.DEFAULT_STATIC_DIR):
    server_app = create_app(settings.static_dir)

  logger.info("App listening on port %s", config.FLAGS.port)
  uvicorn.run(server_app, host=config.FLAGS.host, port=config.FLAGS.port)


if __name__ == "__main__":
  absl_app.run(main)
