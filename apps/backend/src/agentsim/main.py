import asyncio
import json
import logging
from typing import Literal

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, StreamingResponse

from .agents import AgentContext
from .config import get_settings
from .models import (
    ApprovalResponseRequest,
    ExecuteWorkflowRequest,
    HealthResponse,
    StartSimulationRequest,
)
from .simulator import SimulationError, create_engine
from .simulator.state import SimulationEvent
from .workflow.report import ExecutionReport

load_dotenv()

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Agent Simulator API",
    description="Simulated community agents running human-in-the-loop contributor workflows",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

context = AgentContext(create_engine(settings), event_buffer_size=settings.ui_event_buffer_size)
context.initialize()

NOT_FOUND_ERRORS = {"unknown_agent", "unknown_workflow", "approval_not_found"}


def _http_error(error: SimulationError) -> HTTPException:
    status_code = 404 if error.error_type in NOT_FOUND_ERRORS else 409
    return HTTPException(status_code=status_code, detail=str(error))


def _sse(event: SimulationEvent) -> str:
    return f"data: {json.dumps(event.model_dump(mode='json'))}\n\n"


@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


# --- Registry ---

@app.get("/api/agents")
def list_agents():
    return [agent.model_dump(mode="json") for agent in context.engine.get_agents()]


@app.get("/api/workflows")
def list_workflows():
    return [wf.model_dump(mode="json") for wf in context.engine.get_workflows()]


# --- Simulation run-state ---

@app.get("/api/simulation/status")
def simulation_status():
    return context.engine.get_status().model_dump()


@app.post("/api/simulation/start")
async def start_simulation(request: StartSimulationRequest):
    """Start the clock. Starting a paused simulation also resumes halted executions."""
    was_paused = context.engine.get_status().is_paused
    context.start_simulation(request.speed or settings.simulation_speed)
    if was_paused:
        await context.engine.resume()
        context.refresh_data()
    return context.engine.get_status().model_dump()


@app.post("/api/simulation/pause")
def pause_simulation():
    context.stop_simulation()
    return context.engine.get_status().model_dump()


@app.post("/api/simulation/resume")
async def resume_simulation():
    await context.engine.resume()
    context.refresh_data()
    return context.engine.get_status().model_dump()


@app.post("/api/simulation/reset")
def reset_simulation():
    context.engine.reset()
    context.refresh_data()
    return context.engine.get_status().model_dump()


# --- Executions ---

@app.post("/api/executions")
async def execute_workflow(request: ExecuteWorkflowRequest):
    try:
        execution = await context.engine.execute_workflow(
            request.agent_id,
            request.workflow_id,
            contributor=request.contributor,
            repository=request.repository,
        )
    except SimulationError as e:
        raise _http_error(e)
    finally:
        context.refresh_data()
    return execution.model_dump(mode="json")


@app.get("/api/executions")
def list_active_executions():
    return [e.model_dump(mode="json") for e in context.engine.get_active_workflows()]


@app.get("/api/executions/{execution_id}")
def get_execution(execution_id: str):
    execution = context.engine.get_execution(execution_id)
    if execution is None:
        raise HTTPException(status_code=404, detail="Execution not found")
    return execution.model_dump(mode="json")


@app.get("/api/executions/{execution_id}/report")
def get_execution_report(execution_id: str, format: Literal["json", "markdown"] = "json"):
    execution = context.engine.get_execution(execution_id)
    if execution is None:
        raise HTTPException(status_code=404, detail="Execution not found")
    report = ExecutionReport.from_execution(
        execution, context.engine.get_workflow(execution.workflow_id)
    )
    if format == "markdown":
        return PlainTextResponse(report.to_markdown(), media_type="text/markdown")
    return report.to_dict()


# --- Approvals ---

@app.get("/api/approvals")
def list_pending_approvals():
    return [a.model_dump(mode="json") for a in context.engine.get_pending_approvals()]


@app.post("/api/approvals/{approval_id}/respond")
async def respond_to_approval(approval_id: str, request: ApprovalResponseRequest):
    try:
        await context.engine.respond_to_approval(
            approval_id,
            request.response,
            comments=request.comments,
            responder=request.responder,
        )
    except SimulationError as e:
        raise _http_error(e)
    finally:
        context.refresh_data()
    return {"status": "recorded", "approval_id": approval_id, "response": request.response}


# --- Events ---

@app.get("/api/events")
def recent_events(limit: int = 50):
    return [e.model_dump(mode="json") for e in context.engine.get_recent_events(limit)]


@app.get("/api/events/stream")
async def stream_events(replay: int = 0, max_events: int | None = None):
    """Server-sent events: optional backlog of recent events, then live events."""
    backlog = list(reversed(context.engine.get_recent_events(replay))) if replay > 0 else []

    async def event_stream():
        # Subscribe only once streaming starts so the finally below always runs
        queue: asyncio.Queue[SimulationEvent] = asyncio.Queue()
        subscription_id = context.subscribe(queue.put_nowait)
        sent = 0
        try:
            for event in backlog:
                if max_events is not None and sent >= max_events:
                    return
                yield _sse(event)
                sent += 1
            while max_events is None or sent < max_events:
                event = await queue.get()
                yield _sse(event)
                sent += 1
        finally:
            context.unsubscribe(subscription_id)

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
