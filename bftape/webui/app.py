from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException, Response, status
from pydantic import BaseModel, Field

from bftape.errors import RunFailed, StepLimitExceeded
from bftape.inspector import DEFAULT_MAX_SIZE, ExecutionState, InspectorSession
from bftape.runner import Runner
from bftape.streams import BufferedInput, RecordingOutput

from .session import SessionRecord, SessionStore


def _string_to_input_bytes(data: str) -> List[int]:
    return [ord(ch) & 0xFF for ch in data]


def _state_to_dict(state: ExecutionState) -> dict:
    return {
        "step": state.step,
        "pc": state.pc,
        "instruction": state.instruction,
        "pointer": state.pointer,
        "tape_start": state.tape_start,
        "tape": list(state.tape),
        "output": state.output,
        "code_length": state.code_length,
    }


def _calculate_total_steps(
    code: str,
    input_template: List[int],
    max_size: int,
    cap: int = 10000,
) -> tuple[int, bool]:
    runner = Runner(max_size, code, BufferedInput(input_template), RecordingOutput())
    try:
        result = runner.run_for(cap)
    except RunFailed as exc:
        return exc.steps, False
    if result.terminated:
        return result.steps, False
    return cap, True


class SessionConfiguration(BaseModel):
    code: str = ""
    input: str = ""
    max_size: int = Field(default=DEFAULT_MAX_SIZE, ge=1)
    tape_window: int = Field(default=10, ge=0)
    max_steps: Optional[int] = Field(default=None, ge=1)
    history_limit: int = Field(default=200, ge=1)


class SessionState(BaseModel):
    step: int
    pc: int
    instruction: Optional[str]
    pointer: int
    tape_start: int
    tape: List[int]
    output: str
    code_length: int


class SessionPayload(BaseModel):
    session_id: str
    code: str
    state: SessionState
    history: List[SessionState]
    finished: bool
    error: Optional[str]
    history_size: int
    breakpoints: List[int]
    hit_breakpoint: Optional[int]
    total_steps: int
    total_steps_capped: bool


class StepResponse(BaseModel):
    session_id: str
    code: str
    states: List[SessionState]
    history: List[SessionState]
    finished: bool
    error: Optional[str]
    history_size: int
    breakpoints: List[int]
    hit_breakpoint: Optional[int]
    total_steps: int
    total_steps_capped: bool


class StepRequest(BaseModel):
    count: int = Field(default=1, ge=1)


class RunRequest(BaseModel):
    limit: Optional[int] = Field(default=None, ge=1)
    ignore_breakpoints: bool = False


class QuantumRequest(BaseModel):
    steps: int = Field(ge=1)


class BreakpointRequest(BaseModel):
    pc: int = Field(ge=0)


def _error_message(session: InspectorSession) -> Optional[str]:
    if session.error is None:
        return None
    return f"error after {session.runner.step_count} steps: {session.error.error}"


def create_app(store: Optional[SessionStore] = None) -> FastAPI:
    session_store = store or SessionStore()
    app = FastAPI(title="bftape session API", version="0.1.0")

    def _get_record(session_id: str) -> SessionRecord:
        try:
            return session_store.get(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    def _history_states(session: InspectorSession) -> List[SessionState]:
        return [SessionState(**_state_to_dict(state)) for state in session.history]

    def _serialize_states(states: List[ExecutionState]) -> List[SessionState]:
        return [SessionState(**_state_to_dict(state)) for state in states]

    def _build_payload(record: SessionRecord) -> SessionPayload:
        session = record.session
        return SessionPayload(
            session_id=record.session_id,
            code=session.program_text,
            state=SessionState(**_state_to_dict(session.current_state())),
            history=_history_states(session),
            finished=session.is_finished(),
            error=_error_message(session),
            history_size=len(session.history),
            breakpoints=session.list_breakpoints(),
            hit_breakpoint=session.hit_breakpoint,
            total_steps=record.total_steps,
            total_steps_capped=record.total_steps_capped,
        )

    def _build_step_response(record: SessionRecord, states: List[ExecutionState]) -> StepResponse:
        session = record.session
        return StepResponse(
            session_id=record.session_id,
            code=session.program_text,
            states=_serialize_states(states),
            history=_history_states(session),
            finished=session.is_finished(),
            error=_error_message(session),
            history_size=len(session.history),
            breakpoints=session.list_breakpoints(),
            hit_breakpoint=session.hit_breakpoint,
            total_steps=record.total_steps,
            total_steps_capped=record.total_steps_capped,
        )

    def _conflict(exc: Exception) -> HTTPException:
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    @app.post("/api/session", response_model=SessionPayload, status_code=status.HTTP_201_CREATED)
    def create_session(payload: SessionConfiguration) -> SessionPayload:
        input_bytes = _string_to_input_bytes(payload.input)
        total_steps, total_steps_capped = _calculate_total_steps(
            payload.code,
            input_bytes,
            payload.max_size,
        )
        record = session_store.create_session(
            code=payload.code,
            input_template=input_bytes,
            max_size=payload.max_size,
            tape_window=payload.tape_window,
            max_steps=payload.max_steps,
            history_limit=payload.history_limit,
            total_steps=total_steps,
            total_steps_capped=total_steps_capped,
        )
        return _build_payload(record)

    @app.get("/api/session/{session_id}", response_model=SessionPayload)
    def get_session(session_id: str) -> SessionPayload:
        return _build_payload(_get_record(session_id))

    @app.post("/api/session/{session_id}/reset", response_model=SessionPayload)
    def reset_session(session_id: str) -> SessionPayload:
        try:
            record = session_store.reset(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return _build_payload(record)

    @app.post("/api/session/{session_id}/step", response_model=StepResponse)
    def step_session(session_id: str, payload: StepRequest) -> StepResponse:
        record = _get_record(session_id)
        try:
            states = record.session.step_forward(payload.count)
        except (StepLimitExceeded, RunFailed) as exc:
            raise _conflict(exc) from exc
        return _build_step_response(record, list(states))

    @app.post("/api/session/{session_id}/run", response_model=StepResponse)
    def run_session(session_id: str, payload: RunRequest) -> StepResponse:
        record = _get_record(session_id)
        session = record.session
        original_breakpoints: Optional[set[int]] = None
        if payload.ignore_breakpoints:
            original_breakpoints = set(session.breakpoints)
            session.clear_breakpoints()
            session.hit_breakpoint = None

        try:
            states = list(session.run_until_break(payload.limit))
        except (StepLimitExceeded, RunFailed) as exc:
            raise _conflict(exc) from exc
        finally:
            if original_breakpoints is not None:
                session.breakpoints = set(original_breakpoints)
                session.hit_breakpoint = None

        return _build_step_response(record, states)

    @app.post("/api/session/{session_id}/quantum", response_model=StepResponse)
    def run_session_quantum(session_id: str, payload: QuantumRequest) -> StepResponse:
        record = _get_record(session_id)
        try:
            state = record.session.run_quantum(payload.steps)
        except (StepLimitExceeded, RunFailed) as exc:
            raise _conflict(exc) from exc
        return _build_step_response(record, [state])

    @app.post("/api/session/{session_id}/breakpoints", response_model=SessionPayload)
    def add_breakpoint(session_id: str, payload: BreakpointRequest) -> SessionPayload:
        record = _get_record(session_id)
        record.session.add_breakpoint(payload.pc)
        return _build_payload(record)

    @app.delete("/api/session/{session_id}/breakpoints/{pc}", response_model=SessionPayload)
    def remove_breakpoint(session_id: str, pc: int) -> SessionPayload:
        record = _get_record(session_id)
        if not record.session.remove_breakpoint(pc):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Breakpoint not found at pc={pc}",
            )
        return _build_payload(record)

    @app.delete("/api/session/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_session(session_id: str) -> Response:
        if not session_store.remove(session_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown session id: {session_id}",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


__all__ = ["create_app"]
