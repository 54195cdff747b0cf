# app.py — Roadmap Coach: topic-gated learning-roadmap chat
# Groq backend, FastAPI JSON API
# ----------------------------------------------------------

import logging
import threading
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

import config
from groq_client import GroqClient
from session import Backend, ConversationSession, SessionBusy

logging.basicConfig(level=config.LOG_LEVEL, format='[%(levelname)s] %(message)s')
logger = logging.getLogger(__name__)

# -------------------------
# Session registry
# -------------------------
SESSIONS: Dict[str, ConversationSession] = {}
_sessions_lock = threading.Lock()

# Built on first use so the app imports without GROQ_API_KEY
BACKEND: Optional[Backend] = None


def get_backend() -> Backend:
    global BACKEND
    if BACKEND is None:
        BACKEND = GroqClient()
    return BACKEND


def _backend_call(messages):
    return get_backend()(messages)


def new_conversation(user_id: str) -> ConversationSession:
    with _sessions_lock:
        s = SESSIONS[user_id] = ConversationSession(backend=_backend_call)
    return s


def get_session(user_id: str) -> ConversationSession:
    with _sessions_lock:
        s = SESSIONS.get(user_id)
        if s is None:
            s = SESSIONS[user_id] = ConversationSession(backend=_backend_call)
    return s

# -------------------------
# Schemas
# -------------------------
class MessageOut(BaseModel):
    role: str
    content: str

class ConversationOut(BaseModel):
    messages: List[MessageOut] = Field(default_factory=list)
    phase: str
    busy: bool = False

class StartRequest(BaseModel):
    user_id: str

class ChatRequest(BaseModel):
    user_id: str
    message: str = Field(..., max_length=config.MAX_INPUT_CHARS)


def _out(s: ConversationSession) -> ConversationOut:
    return ConversationOut(
        messages=[MessageOut(**m.as_dict()) for m in s.get_messages()],
        phase=s.state.phase.value,
        busy=s.busy,
    )

# -------------------------
# FastAPI app
# -------------------------
app = FastAPI(title="Roadmap Coach", version="1.0.0")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True,
                   allow_methods=["*"], allow_headers=["*"])

@app.get("/health")
def health():
    return {"ok": True}

@app.post("/start", response_model=ConversationOut)
def start(req: StartRequest):
    return _out(new_conversation(req.user_id))

@app.post("/reset", response_model=ConversationOut)
def reset(req: StartRequest):
    s = get_session(req.user_id)
    s.reset()
    return _out(s)

@app.get("/messages/{user_id}", response_model=ConversationOut)
def messages(user_id: str):
    return _out(get_session(user_id))

@app.post("/chat", response_model=ConversationOut)
def chat(req: ChatRequest):
    # same guard as the input box: nothing to send
    if not req.message.strip():
        raise HTTPException(status_code=422, detail="Message is empty")
    s = get_session(req.user_id)
    try:
        s.submit(req.message)
    except SessionBusy:
        raise HTTPException(status_code=409, detail="Still answering your previous message")
    return _out(s)
