# topics.py — Topic policy: allow/deny vocabulary and goal classification
from typing import Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

# In-scope domains. Edit these lists to widen or narrow what the coach will plan for.
ALLOWED_TOPICS = [
    "programming", "software development", "web development", "mobile development",
    "data science", "machine learning", "artificial intelligence", "cybersecurity",
    "cloud computing", "devops", "blockchain", "game development",
    "ui/ux design", "graphic design", "3d modeling", "digital art",
    "business analysis", "project management", "digital marketing", "seo",
    "data analysis", "database management", "networking", "system administration",
]

# Explicitly blocked, checked before anything else
RESTRICTED_TOPICS = [
    "medical", "health", "diagnosis", "treatment", "medicine", "healthcare",
    "legal advice", "financial advice", "investment", "trading", "gambling",
    "weapons", "explosives", "drugs", "illegal activities",
]

# Words that signal a professional/learning goal even without a known domain
INTENT_KEYWORDS = [
    "learn", "become", "master", "developer", "engineer", "designer",
    "programming", "coding", "software", "app", "web", "data",
    "career", "skill", "certification", "course", "training",
]

EXAMPLE_GOALS = [
    "I want to become a Full-Stack Web Developer",
    "I want to learn Machine Learning from scratch",
    "I want to master UI/UX Design",
]


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    accepted: bool
    rejection_message: Optional[str] = None


class TopicClassifier(Protocol):
    """Anything that can decide whether a stated goal is in scope."""

    def classify(self, text: str) -> ValidationResult: ...


class KeywordTopicPolicy:
    """
    Substring heuristic over fixed phrase lists.

    Restricted phrases always win, so a goal that names both an allowed and a
    restricted topic is blocked. On the accept side the match is deliberately
    loose: an allowed phrase in the input, an allowed phrase containing the
    input's first word, or any intent keyword is enough.
    """

    def __init__(self,
                 allowed: Sequence[str] = ALLOWED_TOPICS,
                 restricted: Sequence[str] = RESTRICTED_TOPICS,
                 intent_keywords: Sequence[str] = INTENT_KEYWORDS):
        self.allowed = tuple(t.lower() for t in allowed)
        self.restricted = tuple(t.lower() for t in restricted)
        self.intent_keywords = tuple(k.lower() for k in intent_keywords)

    # -------------------------
    # Matching
    # -------------------------
    def is_restricted(self, text: str) -> bool:
        t = text.lower()
        return any(topic in t for topic in self.restricted)

    def has_allowed_topic(self, text: str) -> bool:
        t = text.lower()
        words = t.split()
        first = words[0] if words else ""
        if any(topic in t for topic in self.allowed):
            return True
        # an empty first word is contained in every phrase, so it never counts
        return bool(first) and any(first in topic for topic in self.allowed)

    def has_intent(self, text: str) -> bool:
        t = text.lower()
        return any(k in t for k in self.intent_keywords)

    def classify(self, text: str) -> ValidationResult:
        text = text or ""
        if self.is_restricted(text):
            return ValidationResult(accepted=False, rejection_message=self.restriction_message())
        if not self.has_allowed_topic(text) and not self.has_intent(text):
            return ValidationResult(accepted=False, rejection_message=self.unclear_message())
        return ValidationResult(accepted=True)

    # -------------------------
    # Rejection texts
    # -------------------------
    def restriction_message(self) -> str:
        sample = ", ".join(self.allowed[:10])
        return (
            "🚫 **Topic Restriction**\n\n"
            "I cannot assist with this topic as it falls outside my allowed domains. "
            "I can only help with professional and technical skills such as:\n\n"
            f"{sample}, and more.\n\n"
            "Please share a career or skill goal related to technology, design, or business."
        )

    def unclear_message(self) -> str:
        tech = [t for t in self.allowed if "development" in t or "programming" in t]
        examples = "\n".join(f'- "{g}"' for g in EXAMPLE_GOALS)
        return (
            "⚠️ **Unclear Goal or Outside Scope**\n\n"
            "I specialize in creating learning roadmaps for:\n\n"
            f"• **Technology:** {', '.join(tech) or 'software and IT skills'}\n"
            "• **Design:** UI/UX design, graphic design, 3D modeling\n"
            "• **Business Skills:** Project management, data analysis, digital marketing\n\n"
            "Please describe your goal in one of these areas. For example:\n"
            f"{examples}"
        )


DEFAULT_POLICY = KeywordTopicPolicy()


def classify(text: str) -> ValidationResult:
    return DEFAULT_POLICY.classify(text)
