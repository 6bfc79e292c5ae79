import os

from dotenv import load_dotenv

# Load from .env if it exists (useful for local development)
load_dotenv()

# Provider credentials (either may be empty; an empty key disables that provider)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")

# Primary provider (OpenAI-compatible, also serves embeddings)
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")

# Fast provider (Groq, OpenAI-compatible chat API)
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")

LLM_TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_S", "30"))

LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "").upper()
