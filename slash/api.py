"""FastAPI app serving a Router at POST /."""

from fastapi import FastAPI, Request, BackgroundTasks
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from slash.router import Router


NOT_FOUND = {"error": "Not found"}

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def _read_fields(request: Request) -> dict:
    """Parse the body into a flat field dict. Slack sends form-encoded data."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}
    try:
        form = await request.form()
    except (HTTPException, MultiPartException):
        # Unparseable multipart gets the router's invalid-request envelope
        return {}
    return {key: value for key, value in form.items() if isinstance(value, str)}


def create_app(router: Router) -> FastAPI:
    """Build an app for `router`.

    Mount it wherever Slack should call it:

        app.mount("/slack", create_app(router))
    """
    app = FastAPI(
        title=f"{router.name} slash commands",
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )

    @app.post("/")
    async def slash_command(request: Request, background_tasks: BackgroundTasks):
        # Read the exact bytes first: the signature covers the unparsed body
        raw_body = await request.body()
        fields = await _read_fields(request)

        result = await router.handle(fields, request.headers, raw_body, background_tasks)
        return JSONResponse(result.body, status_code=result.status_code, background=background_tasks)

    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def not_found(path: str):
        return JSONResponse(NOT_FOUND, status_code=404)

    return app
