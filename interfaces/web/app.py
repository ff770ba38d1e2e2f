"""FastAPI application that exposes the skill router."""
from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from core import ConversationLog, build_assistant, load_profile
from core.dispatcher import SkillDispatcher

LOGGER = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    profile: str = "default"


@dataclass
class AssistantSession:
    """A dispatcher plus the message log shown to the web client."""

    dispatcher: SkillDispatcher
    history: ConversationLog = field(default_factory=ConversationLog)

    def close(self) -> None:
        self.dispatcher.close()


sessions: Dict[str, AssistantSession] = {}
_sessions_lock = threading.Lock()


def close_sessions() -> None:
    with _sessions_lock:
        while sessions:
            profile, session = sessions.popitem()
            LOGGER.info("Closing assistant session for profile %s", profile)
            session.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_sessions()


app = FastAPI(title="Skill Router Assistant", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_session(profile: str) -> AssistantSession:
    profile = profile.lower()
    with _sessions_lock:
        if profile not in sessions:
            try:
                config = load_profile(profile)
            except FileNotFoundError as exc:
                raise HTTPException(status_code=404, detail=str(exc)) from exc
            history_limit = int(config.get("app", {}).get("history_limit", 100))
            sessions[profile] = AssistantSession(
                dispatcher=build_assistant(config),
                history=ConversationLog(max_length=history_limit),
            )
        return sessions[profile]


@app.get("/healthz")
async def healthcheck() -> dict:
    return {"status": "ok"}


# Handlers that dispatch are plain functions; FastAPI runs them in its
# worker threadpool.
@app.post("/api/chat")
def chat(request: ChatRequest) -> dict:
    session = get_session(request.profile)
    session.history.add_user_message(request.message)
    result = session.dispatcher.route(request.message)
    session.history.add_dispatch_result(result)
    return {
        "profile": request.profile,
        "result": result.to_dict(),
        "history": session.history.to_list(),
    }


@app.get("/api/history")
def history(profile: str = "default") -> dict:
    session = get_session(profile)
    return {"profile": profile, "history": session.history.to_list()}


@app.get("/api/skills")
def skills(profile: str = "default") -> dict:
    session = get_session(profile)
    return {"profile": profile, "skills": session.dispatcher.available_skills()}
