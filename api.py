from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from errors import JobError


class JobIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    execute_at: datetime = Field(alias="executeAt")


def create_app(service) -> FastAPI:
    """Build the HTTP app around a JobService; starts its scheduler, if any, with the app."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = service.scheduler
        if scheduler is not None:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.stop(timeout=5.0)

    app = FastAPI(title="jobreg", lifespan=lifespan)

    @app.exception_handler(JobError)
    async def job_error_handler(request: Request, exc: JobError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    # ---------- Jobs ----------
    @app.post("/jobs", status_code=201)
    def create_job(body: JobIn):
        return service.submit(body.description, body.execute_at).to_dict()

    @app.get("/jobs")
    def list_jobs():
        return [job.to_dict() for job in service.list_all()]

    @app.get("/jobs/{job_id}")
    def get_job(job_id: str):
        return service.get(job_id).to_dict()

    @app.delete("/jobs/{job_id}")
    def cancel_job(job_id: str):
        return service.cancel(job_id).to_dict()

    # Blocks until the simulated work is done.
    @app.post("/jobs/{job_id}/run")
    def run_job(job_id: str):
        return service.run_now(job_id).to_dict()

    return app
