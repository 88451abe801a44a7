# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Demo service shipped in the slim runtime image.

Two static JSON endpoints, served on all interfaces at port 8000.

Usage:
    python3 app.py
"""

import logging

import uvicorn
from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

HOST = "0.0.0.0"
PORT = 8000

GREETING = "Hello from your Dockerized Flask app!"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class MessageResponse(BaseModel):
    """Greeting returned by the root endpoint."""

    message: str


class HealthResponse(BaseModel):
    """Liveness status."""

    status: str


app = FastAPI(
    title="Slim App",
    description="Demo service running in a slim two-stage image",
    version="1.0.0",
)


@app.get(
    "/",
    response_model=MessageResponse,
    summary="Root endpoint",
    description="Returns a static greeting.",
)
async def root() -> MessageResponse:
    """Root endpoint returning the greeting."""
    return MessageResponse(message=GREETING)


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns the liveness status of the service.",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> HealthResponse:
    """Health check endpoint for container orchestration."""
    return HealthResponse(status="ok")


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):  # pylint: disable=unused-argument
    """Global exception handler for unhandled exceptions."""
    logger.exception("Unhandled exception occurred")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "message": "An internal server error occurred"},
    )


if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
