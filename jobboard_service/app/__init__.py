"""FastAPI application: factory, lifespan, middleware and routing."""
