"""
agentns Main module - CLI and HTTP API
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import uvicorn
from fastapi import FastAPI, HTTPException, status
from fastapi.routing import APIRouter
from pydantic import BaseModel, Field

from agentns.features import FeatureRegistry, OperationResult, handle_list_namespaces
from agentns.host import VERBOSE_LEVEL
from agentns.version import get_version

# Module-level logger
logger = logging.getLogger("agentns.main")


# Create CLI app with Typer
app = typer.Typer(
    name="agentns",
    help="agentns - run documents through namespace extension modules",
    add_completion=False,
)

# Create FastAPI app for API server
api_app = FastAPI(
    title="agentns API",
    description="API for running documents through namespace extension modules",
    version=get_version(),
)

# API router for versioned endpoints
api_router = APIRouter(prefix="/api/v1")


# Request models
class RunRequest(BaseModel):
    document: str
    input: List[str] = Field(default_factory=list)
    environment: Dict[str, str] = Field(default_factory=dict)


# ----------------- Helper Functions -----------------


class ElapsedMsFormatter(logging.Formatter):
    """Formatter that shows milliseconds since program start, right-aligned for up to 9999 seconds."""

    def __init__(self, fmt=None, datefmt=None, *args, **kwargs):
        super().__init__(fmt, datefmt, *args, **kwargs)
        self.start_time = time.monotonic()
        self.width = 8  # Enough for '9999000ms'

    def format(self, record):
        elapsed_ms = int((time.monotonic() - self.start_time) * 1000)
        if elapsed_ms < 10**7:
            elapsed = f"[{elapsed_ms:>{self.width}}ms]"
        else:
            elapsed = f"[{elapsed_ms}ms]"
        record.elapsed = elapsed
        return super().format(record)


def setup_logging(debug: bool = False, verbose: bool = False) -> None:
    """Set up logging configuration"""
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = VERBOSE_LEVEL
    else:
        log_level = logging.INFO
    formatter = ElapsedMsFormatter("%(elapsed)s %(message)s")
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers = []  # Remove any existing handlers
    root.addHandler(handler)
    root.setLevel(log_level)

    for noisy in ("uvicorn.access", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.DEBUG if debug else logging.WARNING)


def _feature_or_exit(feature_name: str):
    feature = FeatureRegistry.get_feature(feature_name)
    if not feature:
        logger.error("Unknown feature: %s", feature_name)
        raise typer.Exit(code=1)
    return feature


def _handle_cli_result(feature_name: str, result: OperationResult) -> None:
    if not result.success:
        logger.error("Operation failed: %s", result.error or "Unknown error")
        if result.data:
            error = result.data.get("error") if isinstance(result.data, dict) else None
            if error:
                logger.error("  %s", json.dumps(error, sort_keys=True))
        raise typer.Exit(code=1)

    data = result.data or {}
    if feature_name == "run":
        # Variables go to stdout; logs and prompts stay on stderr
        typer.echo(json.dumps(data.get("variables", {}), indent=2, sort_keys=True))
    elif feature_name == "version":
        typer.echo(f"agentns version: {data.get('version', 'unknown')}")


def _parse_assignments(assignments: Optional[List[str]]) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for item in assignments or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}", param_hint="--env")
        parsed[key] = value
    return parsed


# ----------------- CLI Commands -----------------


@app.command()
def version() -> None:
    """Show the agentns version"""
    setup_logging(False)
    _handle_cli_result("version", _feature_or_exit("version").handler())


@app.command()
def run(
    filename: str = typer.Argument(..., help="Document to run"),
    input_file: Optional[Path] = typer.Option(
        None, "--input", help="Read stdin:read lines from this file instead of standard input"
    ),
    env: Optional[List[str]] = typer.Option(
        None, "--env", help="Set an environment variable before running (KEY=VALUE)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging (between info and debug)"),
) -> None:
    """Run a document"""
    setup_logging(debug, verbose)
    logger.debug("agentns version: %s", get_version())

    if not Path(filename).is_file():
        logger.error("File not found: %s", filename)
        raise typer.Exit(code=1)

    environment = _parse_assignments(env)
    feature = _feature_or_exit("run")

    input_stream = None
    try:
        if input_file is not None:
            input_stream = open(input_file, "r", encoding="utf-8")
        result = feature.handler(
            filename=filename,
            input_stream=input_stream,
            environment=environment,
            process_environment=True,
        )
    except typer.Exit:
        raise
    except OSError as e:
        logger.error("Error reading %s: %s", input_file, e)
        raise typer.Exit(code=1) from e
    except Exception as e:
        logger.exception("An unexpected error occurred")
        raise typer.Exit(code=1) from e
    finally:
        if input_stream is not None:
            input_stream.close()

    _handle_cli_result("run", result)


@app.command("list-namespaces")
def list_namespaces() -> None:
    """List available namespaces"""
    setup_logging(False)

    result = handle_list_namespaces()
    if not result.success:
        logger.error("Error: %s", result.error)
        raise typer.Exit(code=1)

    namespaces = result.data.get("namespaces", {})
    if not namespaces:
        typer.echo("  No namespaces found.")
        return
    typer.echo("Available namespaces:")
    for uri, description in sorted(namespaces.items()):
        typer.echo(f"  {uri:<45} {description}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind the API server"),
    port: int = typer.Option(8000, help="Port to bind the API server"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
):
    """Start the agentns API server"""
    setup_logging(debug)

    logger.info(f"Starting agentns API server version {get_version()} on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(api_app, host=host, port=port)


# ----------------- API Endpoints -----------------


def _feature_or_404(name: str):
    feature = FeatureRegistry.get_feature(name)
    if not feature:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{name} feature not found",
        )
    return feature


@api_router.get("/version")
async def get_version_endpoint():
    """Get agentns version"""
    try:
        result = _feature_or_404("version").handler()
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=result.error or "An error occurred",
            )
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in version endpoint: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e


@api_router.get("/namespaces")
async def list_namespaces_endpoint():
    """List registered namespaces"""
    result = handle_list_namespaces()
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.error or "An error occurred",
        )
    return result.data


@api_router.post("/run")
def run_document_endpoint(request: RunRequest):
    """Run a document against the request's input lines and environment.

    The environment is an in-memory copy; the server's own process
    environment is never read or written.
    """
    try:
        result = _feature_or_404("run").handler(
            document=request.document,
            input=request.input,
            environment=request.environment,
            process_environment=False,
        )
        if not result.success:
            detail: Any = result.error or "An error occurred"
            if result.data:
                detail = {"message": detail, **result.data}
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in run endpoint: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e


# Include the router in the FastAPI app
api_app.include_router(api_router)


if __name__ == "__main__":
    app()
