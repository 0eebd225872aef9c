"""API routers. Each module exposes a ``setup_*_router`` factory."""
