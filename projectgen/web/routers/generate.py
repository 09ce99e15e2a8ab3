from __future__ import annotations
import logging
import uuid

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse, PlainTextResponse, Response

from projectgen.config import Settings
from projectgen.schemas import GenerateResponse, ProjectRequest, StatusResponse
from projectgen.services.pipeline import GenerationPipeline
from projectgen.services.registry import JobRegistry
from projectgen.web.deps import get_app_settings, get_pipeline, get_registry

log = logging.getLogger("projectgen.api")

router = APIRouter(prefix="/api")

def _new_job_id(registry: JobRegistry) -> str:
    job_id = uuid.uuid4().hex[:12]
    while job_id in registry:
        job_id = uuid.uuid4().hex[:12]
    return job_id

@router.post("/generate", response_model=GenerateResponse)
async def generate(req: ProjectRequest,
                   registry: JobRegistry = Depends(get_registry),
                   pipeline: GenerationPipeline = Depends(get_pipeline)):
    job_id = None
    try:
        job_id = _new_job_id(registry)
        registry.create(job_id)
        log.info("[Job %s] Started", job_id)
        pipeline.start(job_id, req)
    except Exception:
        log.exception("Failed to start job")
        if job_id is not None:
            registry.delete(job_id)
        return JSONResponse({"error": "Failed to start generation"}, status_code=500)
    return {"jobId": job_id}

@router.get("/status/{job_id}", response_model=StatusResponse)
async def status(job_id: str, registry: JobRegistry = Depends(get_registry)):
    job = registry.get(job_id)
    if job is None:
        return JSONResponse({"error": "Job not found"}, status_code=404)
    return job.public()

@router.get("/download/{job_id}")
async def download(job_id: str,
                   registry: JobRegistry = Depends(get_registry),
                   settings: Settings = Depends(get_app_settings)):
    job = registry.get(job_id)
    if job is None or not job.result:
        return PlainTextResponse("File not found or not ready", status_code=404)
    registry.schedule_delete(job_id, settings.download_cleanup_s)
    return Response(
        content=job.result,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="project.pdf"'},
    )

@router.get("/health")
async def health(registry: JobRegistry = Depends(get_registry),
                 pipeline: GenerationPipeline = Depends(get_pipeline)):
    return {"ok": True, "jobs": len(registry), "provider": pipeline.llm.name}
