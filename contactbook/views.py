from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from starlette.staticfiles import StaticFiles

PACKAGE_DIR = Path(__file__).resolve().parent


def render(request: Request, template_name: str, context: dict):
    context = {**context, "request": request}
    return request.app.state.templates.TemplateResponse(request, template_name, context)


def register_routes(app: FastAPI) -> None:
    """
    Serve the browser client: one page at /app that talks to the JSON API
    with fetch(), plus its script under /static.
    """
    app.state.templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))
    app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")

    @app.get("/app", response_class=HTMLResponse, include_in_schema=False)
    def contact_book_page(request: Request):
        settings = request.app.state.settings
        return render(
            request,
            "index.html",
            {
                "title": settings.APP_NAME,
                "page_size": settings.PAGE_SIZE,
            },
        )
