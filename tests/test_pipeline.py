from __future__ import annotations
import asyncio

from projectgen.errors import GenerationError
from projectgen.schemas import ProjectRequest
from projectgen.services.pipeline import DONE_MESSAGE, FAILED_MESSAGE, GenerationPipeline
from projectgen.services.registry import JobRegistry

from conftest import PDF_BYTES, FakeLLM, FakeRenderer

class RecordingRegistry(JobRegistry):
    def __init__(self):
        super().__init__()
        self.history = []

    def update(self, job_id, **fields):
        job = super().update(job_id, **fields)
        if job is not None:
            self.history.append((job.status, job.progress, job.message))
        return job

def _run(llm, renderer, req=None):
    reg = RecordingRegistry()
    reg.create("abc123")
    pipeline = GenerationPipeline(reg, llm, renderer, pacing_delay=0)
    asyncio.run(pipeline.run("abc123", req or ProjectRequest(topic="X")))
    return reg

def test_success_completes_with_pdf():
    renderer = FakeRenderer()
    reg = _run(FakeLLM(), renderer)
    job = reg.get("abc123")
    assert job.status == "completed"
    assert job.progress == 100
    assert job.message == DONE_MESSAGE
    assert job.result == PDF_BYTES
    assert job.error is None
    assert renderer.sessions[0].closed

def test_progress_is_monotonic_through_checkpoints():
    reg = _run(FakeLLM(), FakeRenderer())
    progress = [p for _, p, _ in reg.history]
    assert progress == sorted(progress)
    assert progress[0] == 5
    assert progress[-1] == 100
    assert {10, 45, 55, 70, 80, 90} <= set(progress)

def test_document_contains_title_page_and_body():
    renderer = FakeRenderer()
    req = ProjectRequest(topic="Фотосинтез", subject="Биология", studentName="Иванов <b>", city="Казань", year="2025")
    _run(FakeLLM(text="## Введение\n\nРастения."), renderer, req)
    html = renderer.sessions[0].html
    assert "Фотосинтез" in html
    assert "Проект по предмету «Биология»" in html
    assert "Иванов &lt;b&gt;" in html
    assert "<h2>Введение</h2>" in html
    assert "Казань — 2025" in html

def test_generation_failure_goes_straight_to_error():
    renderer = FakeRenderer()
    reg = _run(FakeLLM(exc=GenerationError("AI request timed out")), renderer)
    job = reg.get("abc123")
    assert job.status == "error"
    assert job.error == "AI request timed out"
    assert job.message == FAILED_MESSAGE
    assert job.result is None
    assert job.progress == 10
    assert "completed" not in [s for s, _, _ in reg.history]
    assert renderer.sessions == []

def test_empty_response_is_a_failure():
    reg = _run(FakeLLM(text="   "), FakeRenderer())
    job = reg.get("abc123")
    assert job.status == "error"
    assert job.error == "Empty response from AI"
    assert job.result is None

def test_render_failure_releases_browser():
    renderer = FakeRenderer(fail_on_load=True)
    reg = _run(FakeLLM(), renderer)
    job = reg.get("abc123")
    assert job.status == "error"
    assert job.error == "render boom"
    assert job.progress == 80
    assert renderer.sessions[0].closed

def test_empty_pdf_is_a_failure():
    reg = _run(FakeLLM(), FakeRenderer(pdf_bytes=b""))
    job = reg.get("abc123")
    assert job.status == "error"
    assert job.result is None

def test_unexpected_exception_without_message_records_server_error():
    reg = _run(FakeLLM(exc=RuntimeError()), FakeRenderer())
    assert reg.get("abc123").error == "Server Error"

def test_start_tracks_task_and_shutdown_cancels():
    async def scenario():
        reg = JobRegistry()
        reg.create("j1")
        pipeline = GenerationPipeline(reg, FakeLLM(delay=5), FakeRenderer(), pacing_delay=0)
        task = pipeline.start("j1", ProjectRequest(topic="X"))
        await asyncio.sleep(0.05)
        assert pipeline.active == 1
        await pipeline.shutdown()
        return reg.get("j1"), task, pipeline.active

    job, task, active = asyncio.run(scenario())
    assert task.cancelled()
    assert job.status == "error"
    assert job.error == "cancelled"
    assert active == 0
