# session.py — Conversation state machine: one-time topic gate, history, backend outcomes
import logging
import threading
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from prompts import SYSTEM_PROMPT, WELCOME_TEXT, build_request, build_system_prompt
from topics import DEFAULT_POLICY, TopicClassifier

logger = logging.getLogger(__name__)

Backend = Callable[[List[Dict[str, str]]], str]


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Phase(str, Enum):
    AWAITING_GOAL = "awaiting_goal"
    IN_PROGRESS = "in_progress"


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def as_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    history: Tuple[Message, ...] = Field(default_factory=tuple)
    phase: Phase = Phase.AWAITING_GOAL

    def append(self, *messages: Message, phase: Optional[Phase] = None) -> "Session":
        return Session(history=self.history + messages, phase=phase or self.phase)


class SessionBusy(RuntimeError):
    """A submission arrived while the previous one is still waiting on the backend."""


# -------------------------
# Backend failure handling
# -------------------------
class FailureKind(str, Enum):
    OVERLOADED = "overloaded"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"


FAILURE_MESSAGES = {
    FailureKind.OVERLOADED: "⚠️ The AI model is currently overloaded. Please wait a minute and try again. (Free tier has limited requests per minute)",
    FailureKind.RATE_LIMITED: "⚠️ Rate limit reached. You can only make 5 requests per minute and 20 per day on the free tier. Please wait before trying again.",
    FailureKind.UNKNOWN: "Sorry, I encountered an error. Please try again.",
}


def classify_failure(description: str) -> FailureKind:
    d = description or ""
    if "overloaded" in d or "503" in d: return FailureKind.OVERLOADED
    if "429" in d or "quota" in d: return FailureKind.RATE_LIMITED
    return FailureKind.UNKNOWN


def failure_message(error) -> str:
    return FAILURE_MESSAGES[classify_failure(str(error))]


# -------------------------
# Pure transitions
# -------------------------
def new_session() -> Session:
    return Session(history=(Message(role=Role.ASSISTANT, content=WELCOME_TEXT),),
                   phase=Phase.AWAITING_GOAL)


def accept_user_message(session: Session, text: str,
                        classifier: TopicClassifier = DEFAULT_POLICY) -> Tuple[Session, bool]:
    """
    Append a user turn. Returns the next session and whether the backend
    should be called for it.

    The topic gate runs only while awaiting the goal, and the phase moves on
    whatever the verdict, so a rejected user is not gated a second time.
    """
    user_msg = Message(role=Role.USER, content=text)
    if session.phase is Phase.AWAITING_GOAL:
        verdict = classifier.classify(text)
        if not verdict.accepted:
            logger.info("Goal rejected by topic gate; the next turn goes to the backend ungated")
            rejection = Message(role=Role.ASSISTANT, content=verdict.rejection_message or "")
            return session.append(user_msg, rejection, phase=Phase.IN_PROGRESS), False
        return session.append(user_msg, phase=Phase.IN_PROGRESS), True
    return session.append(user_msg), True


def append_reply(session: Session, text: str) -> Session:
    return session.append(Message(role=Role.ASSISTANT, content=text))


def append_failure(session: Session, error) -> Session:
    return session.append(Message(role=Role.ASSISTANT, content=failure_message(error)))


# -------------------------
# Presentation-facing holder
# -------------------------
class ConversationSession:
    """
    Owns the single mutable reference to the current Session and replaces it
    wholesale on every transition. One backend call at a time.
    """

    def __init__(self, backend: Backend,
                 classifier: TopicClassifier = DEFAULT_POLICY,
                 system_prompt: Optional[str] = None):
        self._backend = backend
        self._classifier = classifier
        if system_prompt is None:
            # keyword policies render their own vocabulary into the instruction
            has_vocab = hasattr(classifier, "allowed") and hasattr(classifier, "restricted")
            system_prompt = build_system_prompt(classifier) if has_vocab else SYSTEM_PROMPT
        self._system_prompt = system_prompt
        self._state = new_session()
        self._lock = threading.Lock()

    @property
    def state(self) -> Session:
        return self._state

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def get_messages(self) -> List[Message]:
        return list(self._state.history)

    def reset(self) -> List[Message]:
        self._state = new_session()
        return self.get_messages()

    def submit(self, text: str) -> List[Message]:
        if not self._lock.acquire(blocking=False):
            raise SessionBusy("A previous message is still being answered")
        try:
            prior = self._state
            pending, needs_backend = accept_user_message(prior, text, self._classifier)
            self._state = pending
            if needs_backend:
                request = build_request(prior.history, text, self._system_prompt)
                done = self._call_backend(pending, request)
                if self._state is pending:
                    self._state = done
                else:
                    logger.info("Session was reset while waiting on the backend; reply dropped")
        finally:
            self._lock.release()
        return self.get_messages()

    def _call_backend(self, pending: Session, request: List[Dict[str, str]]) -> Session:
        logger.debug("Backend call with %d messages", len(request))
        try:
            reply = self._backend(request)
        except Exception as e:
            logger.exception("Backend call failed (%s)", classify_failure(str(e)).value)
            return append_failure(pending, e)
        return append_reply(pending, reply)
