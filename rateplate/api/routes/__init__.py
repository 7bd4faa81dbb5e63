from fastapi import FastAPI
from rateplate.api.problems import DEFAULT_RESPONSE

from . import auth, events, health, me, restaurants


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application.

    Every operation documents the problem-details body as its default error.
    """
    for module in (health, auth, me, restaurants, events):
        app.include_router(module.router, responses={"default": DEFAULT_RESPONSE})
