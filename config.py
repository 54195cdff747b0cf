# config.py — Environment-driven settings for the roadmap coach
import os

from dotenv import load_dotenv
load_dotenv()

# -------------------------
# Groq backend
# -------------------------
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_URL = os.getenv("GROQ_URL", "https://api.groq.com/openai/v1/chat/completions")
MODEL_NAME = os.getenv("MODEL_NAME", "llama-3.3-70b-versatile")
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "1024"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "60"))

# -------------------------
# UI limits / logging
# -------------------------
MAX_INPUT_CHARS = int(os.getenv("MAX_INPUT_CHARS", "500"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
