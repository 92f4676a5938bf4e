"""
FastAPI Application Entry Point

Bootstraps the FastAPI app, logging, middleware, and routes.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from vmlauncher.utils.logger import configure_logging
from vmlauncher.utils.logging_middleware import RequestLoggingMiddleware
from vmlauncher.routes.api import router as api_router
from vmlauncher.config import Settings
from vmlauncher.utils.utils import executorsRegister

# Configure logging early
configure_logging(app_name="vmlauncher", service="api")

settings = Settings()  # reads from environment / .env


@asynccontextmanager
async def lifespan(app: FastAPI):
    operations = ", ".join(op.value for op in executorsRegister.operations())
    logger.info(f"✔ Instance executors registered: {operations}")

    # Templates are read per request, a missing one only fails its own endpoint
    current = Settings()
    if not current.vm_req_template:
        logger.warning("VM_REQ_TEMPLATE not set, /api/launch will fail until it is")
    if not current.vm_kill_template:
        logger.warning("VM_KILL_TEMPLATE not set, /api/kill will fail until it is")

    yield

    logger.info("✔ vmlauncher stopped")

app = FastAPI(
    title="vmlauncher",
    description="An API for launching and killing compute instances from request templates",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(api_router, prefix="/api")

@app.get("/")
def root():
    return {"status": "ok", "service": "vmlauncher", "env": settings.app_env}

@app.get("/health")
def health():
    return {"status": "healthy"}


def run():
    import uvicorn

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
