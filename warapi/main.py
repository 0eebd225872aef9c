"""Uvicorn entry point for the Clash War Tracker API.

Settings come from the environment, or from a `.env` file in the working
directory when the variables are not already set.
"""

import uvicorn

from warapi.app_factory import create_app

app = create_app()


def main() -> None:
    """Serve ``app`` on the configured port."""
    context = app.state.context

    uvicorn.run(
        "warapi.main:app",
        host="0.0.0.0",
        port=context.api_port,
        reload=not context.production_mode,
        log_level="info",
    )


if __name__ == "__main__":
    main()
