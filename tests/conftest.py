from __future__ import annotations
import asyncio

import pytest
from fastapi.testclient import TestClient

from projectgen.config import Settings
from projectgen.errors import RenderError
from projectgen.main import create_app
from projectgen.services.providers import LLMProvider

PDF_BYTES = b"%PDF-1.4\n% fake\n%%EOF"

class FakeLLM(LLMProvider):
    name = "fake"

    def __init__(self, text="# Тема\n\n## Введение\n\nТекст.", delay=0.05, exc=None):
        self.text = text
        self.delay = delay
        self.exc = exc
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.text

class FakeSession:
    def __init__(self, renderer):
        self.renderer = renderer
        self.closed = False
        self.html = None

    async def load(self, html):
        await asyncio.sleep(self.renderer.delay)
        if self.renderer.fail_on_load:
            raise RenderError("render boom")
        self.html = html

    async def pdf(self):
        await asyncio.sleep(self.renderer.delay)
        return self.renderer.pdf_bytes

    async def close(self):
        self.closed = True

class FakeRenderer:
    def __init__(self, pdf_bytes=PDF_BYTES, fail_on_load=False, delay=0.02):
        self.pdf_bytes = pdf_bytes
        self.fail_on_load = fail_on_load
        self.delay = delay
        self.sessions = []

    async def open(self):
        session = FakeSession(self)
        self.sessions.append(session)
        return session

@pytest.fixture
def settings() -> Settings:
    return Settings(llm_provider="dummy", pacing_delay_s=0.2, download_cleanup_s=0.2, static_dir="does-not-exist")

@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()

@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()

@pytest.fixture
def client(settings, llm, renderer):
    app = create_app(settings, llm=llm, renderer=renderer)
    with TestClient(app) as c:
        yield c
