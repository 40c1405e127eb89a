import logging
import time
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from api.metrics import (
    PARTIAL_RESULTS_TOTAL,
    REQUEST_LATENCY_SECONDS,
    REQUESTS_TOTAL,
    TASKS_EXTRACTED_TOTAL,
    TASKS_MERGED_TOTAL,
)
from integration.task_exporter import MEDIA_TYPES, TaskExporter
from pipeline.todo_generator import TodoGenerator
from scheduling.slot_suggester import SlotSuggester
from todo_generator.config import GeneratorConfig
from todo_generator.models import AnalysisContext, ContentAnalysis, ExportFormat

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI()
generator = TodoGenerator(config=GeneratorConfig.from_env())
exporter = TaskExporter()
suggester = SlotSuggester()


class NotesIn(BaseModel):
    notes: str
    now: Optional[datetime] = None


class SlotsIn(BaseModel):
    notes: str
    start: datetime
    end: datetime
    now: Optional[datetime] = None


def _record(endpoint: str, status: str, start: float) -> None:
    REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - start)


async def _analyze(notes: str, now: Optional[datetime]) -> ContentAnalysis:
    analysis = await generator.generate_async(notes, AnalysisContext(now=now))
    TASKS_EXTRACTED_TOTAL.inc(len(analysis.extracted_tasks))
    TASKS_MERGED_TOTAL.inc(max(0, analysis.candidates_processed - len(analysis.extracted_tasks)))
    if analysis.partial:
        PARTIAL_RESULTS_TOTAL.inc()
    return analysis


@app.post("/notes")
async def submit_notes(payload: NotesIn) -> dict:
    start = time.time()
    logger.info(f"Received notes submission: {payload.notes[:50]}...")
    analysis = await _analyze(payload.notes, payload.now)
    _record("/notes", "partial" if analysis.partial else "processed", start)
    return analysis.model_dump(mode="json")


@app.post("/export/{fmt}")
async def export_tasks(fmt: str, payload: NotesIn) -> Response:
    start = time.time()
    try:
        export_format = ExportFormat(fmt)
    except ValueError:
        _record("/export", "rejected", start)
        raise HTTPException(status_code=400, detail=f"unsupported export format: {fmt}")

    analysis = await _analyze(payload.notes, payload.now)
    body = exporter.export(analysis.extracted_tasks, export_format)
    _record("/export", "processed", start)
    return Response(content=body, media_type=MEDIA_TYPES[export_format])


@app.post("/slots")
async def suggest_slots(payload: SlotsIn) -> dict:
    start = time.time()
    if payload.end <= payload.start:
        _record("/slots", "rejected", start)
        raise HTTPException(status_code=400, detail="end must be after start")

    analysis = await _analyze(payload.notes, payload.now or payload.start)
    suggestions = suggester.suggest(analysis.extracted_tasks, payload.start, payload.end)
    _record("/slots", "processed", start)
    return {
        "tasks": [t.model_dump(mode="json") for t in analysis.extracted_tasks],
        "suggestions": [s.model_dump(mode="json") for s in suggestions],
    }


@app.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
