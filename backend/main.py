import os

from dotenv import load_dotenv

# Load .env before the app reads its settings
load_dotenv()

from fastapi.openapi.utils import get_openapi  # noqa: E402
from windowquote.main import app  # noqa: E402


def custom_openapi() -> dict:
    """Return OpenAPI schema with project metadata."""
    if app.openapi_schema:
        return app.openapi_schema
    app.openapi_schema = get_openapi(
        title="Window Cleaning Quote API",
        version="1.0.0",
        description="Quotes, bookings and pricing configuration for a window cleaning business.",
        routes=app.routes,
    )
    return app.openapi_schema


app.openapi = custom_openapi

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("UVICORN_RELOAD", "0") == "1",
        workers=int(os.getenv("UVICORN_WORKERS", "1")),
    )
