import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

import tavno.api.deps as deps
from tavno import __version__
from tavno.api.routers.admin import router as admin_router
from tavno.api.routers.auth import router as auth_router
from tavno.api.routers.quests import router as quests_router
from tavno.api.routers.realtime import router as realtime_router
from tavno.api.routers.reviews import router as reviews_router
from tavno.api.routers.search import router as search_router
from tavno.api.routers.users import public_router as public_users_router
from tavno.api.routers.users import router as users_router
from tavno.core.logging import configure_logging
from tavno.infra.seed import seed_demo_data
from tavno.infra.settings import UPLOAD_DIR, UPLOAD_URL_PREFIX

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    if deps.settings.store_backend == "mongo":
        from tavno.infra.db import ping

        if not await ping():
            raise RuntimeError("MongoDB is unreachable; check MONGODB_URI")
    await deps.store.load()
    deps.assets.ensure_dir()
    if deps.settings.seed_demo_data:
        await seed_demo_data(deps.users_repo, deps.quests_repo, deps.hasher)
    log.info("Tavno API ready (store backend: %s)", deps.settings.store_backend)
    try:
        yield
    finally:
        if deps.settings.store_backend == "mongo":
            from tavno.infra.db import close_client

            await close_client()


app = FastAPI(title="Tavno API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers; the /api prefix serves clients that expect it
for prefix in ("", "/api"):
    app.include_router(auth_router, prefix=prefix)
    app.include_router(quests_router, prefix=prefix)
    app.include_router(users_router, prefix=prefix)
    app.include_router(public_users_router, prefix=prefix)
    app.include_router(reviews_router, prefix=prefix)
    app.include_router(search_router, prefix=prefix)
    app.include_router(admin_router, prefix=prefix)
app.include_router(realtime_router)

app.mount(
    UPLOAD_URL_PREFIX.rstrip("/"),
    StaticFiles(directory=str(UPLOAD_DIR), check_dir=False),
    name="uploads",
)


@app.get("/healthz")
def healthz():
    return {"ok": True}


def main() -> None:
    import uvicorn

    uvicorn.run(
        "tavno.api.main:app",
        host=os.getenv("HOST", "localhost"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "").lower() in {"1", "true", "yes"},
    )


if __name__ == "__main__":
    main()
