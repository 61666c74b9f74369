from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from modules.ats.router import router as ats_router
from modules.jobs.router import drain as drain_searches, router as jobs_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await drain_searches()


def create_app() -> FastAPI:
    app = FastAPI(title="Resume & Job Matching API", version="0.2.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ats_router, prefix="/ats", tags=["ats"])
    app.include_router(jobs_router, prefix="/jobs", tags=["jobs"])
    return app


app = create_app()
