from __future__ import annotations
import asyncio, logging
from typing import Dict, Optional

from projectgen.errors import GenerationError, RenderError
from projectgen.schemas import ProjectRequest
from projectgen.services.document import render_document
from projectgen.services.markup import markdown_to_html
from projectgen.services.prompt import build_prompt
from projectgen.services.providers import LLMProvider
from projectgen.services.registry import COMPLETED, ERROR, JobRegistry
from projectgen.services.render import PdfRenderer, RenderSession

log = logging.getLogger("projectgen.pipeline")

# (progress, message) checkpoints, in order
STAGES = {
    "prompt": (5, "Формирование структуры запроса..."),
    "generate": (10, "Консультация с ИИ (написание текста)..."),
    "received": (45, "Обработка ответа от нейросети..."),
    "transform": (55, "Преобразование в академический формат..."),
    "assemble": (70, "Подготовка к печати PDF..."),
    "render": (80, "Рендеринг документа..."),
    "finalize": (90, "Финальная сборка файла..."),
}
DONE_MESSAGE = "Готово!"
FAILED_MESSAGE = "Произошла ошибка при генерации"

class GenerationPipeline:
    """Drives one job per asyncio task from intake to a terminal status."""

    def __init__(self, registry: JobRegistry, llm: LLMProvider, renderer: PdfRenderer, pacing_delay: float = 0.5):
        self.registry = registry
        self.llm = llm
        self.renderer = renderer
        self.pacing_delay = pacing_delay
        self._tasks: Dict[str, asyncio.Task] = {}

    def start(self, job_id: str, req: ProjectRequest) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self.run(job_id, req), name=f"job-{job_id}")
        self._tasks[job_id] = task
        task.add_done_callback(lambda _t, job_id=job_id: self._tasks.pop(job_id, None))
        return task

    @property
    def active(self) -> int:
        return len(self._tasks)

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _stage(self, job_id: str, name: str) -> None:
        progress, message = STAGES[name]
        self.registry.update(job_id, progress=progress, message=message)

    async def run(self, job_id: str, req: ProjectRequest) -> None:
        session: Optional[RenderSession] = None
        try:
            # lets a fast poller observe the 0% state
            await asyncio.sleep(self.pacing_delay)

            self._stage(job_id, "prompt")
            prompt = build_prompt(req)

            self._stage(job_id, "generate")
            markdown_text = await self.llm.generate(prompt)

            self._stage(job_id, "received")
            if not markdown_text or not markdown_text.strip():
                raise GenerationError("Empty response from AI")

            self._stage(job_id, "transform")
            body_html = markdown_to_html(markdown_text)
            document = render_document(req, body_html)

            self._stage(job_id, "assemble")
            session = await self.renderer.open()

            self._stage(job_id, "render")
            await session.load(document)

            self._stage(job_id, "finalize")
            pdf = await session.pdf()
            if not pdf:
                raise RenderError("Renderer produced an empty document")

            self.registry.update(job_id, status=COMPLETED, progress=100, message=DONE_MESSAGE, result=pdf)
            log.info("[Job %s] Completed successfully (%d bytes)", job_id, len(pdf))
        except asyncio.CancelledError:
            self.registry.update(job_id, status=ERROR, error="cancelled", message=FAILED_MESSAGE)
            raise
        except Exception as e:
            log.exception("[Job %s] Failed", job_id)
            self.registry.update(job_id, status=ERROR, error=str(e) or "Server Error", message=FAILED_MESSAGE)
        finally:
            if session is not None:
                try:
                    await session.close()
                except Exception:
                    log.warning("[Job %s] Browser did not close cleanly", job_id, exc_info=True)
