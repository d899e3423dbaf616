import os

from dotenv import load_dotenv

load_dotenv()

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "5166"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Dispatcher pacing (seconds)
MIN_CALL_INTERVAL_SECONDS = float(os.getenv("MIN_CALL_INTERVAL_SECONDS", "45"))
IDLE_INTERVAL_SECONDS = float(os.getenv("IDLE_INTERVAL_SECONDS", "5"))
STREAM_INTERVAL_SECONDS = float(os.getenv("STREAM_INTERVAL_SECONDS", "5"))
DISPATCHER_ENABLED = os.getenv("DISPATCHER_ENABLED", "1") == "1"

# Provider: azure | openai | stub
PROVIDER = os.getenv("PROVIDER", "azure").lower()
AZURE_OPENAI_ENDPOINT = os.getenv("AZURE_OPENAI_ENDPOINT")
AZURE_OPENAI_API_KEY = os.getenv("AZURE_OPENAI_API_KEY")
AZURE_OPENAI_DEPLOYMENT = os.getenv("AZURE_OPENAI_DEPLOYMENT")
AZURE_OPENAI_API_VERSION = os.getenv("AZURE_OPENAI_API_VERSION", "2024-06-01")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
SYSTEM_PROMPT = os.getenv(
    "SYSTEM_PROMPT",
    "You are an AI assistant that helps people find information. "
    "Remember and reference previous messages in the conversation, "
    "and keep answers consistent with what was said before.",
)
CONVERSATION_MAX_TURNS = int(os.getenv("CONVERSATION_MAX_TURNS", "20"))

# Rate-limit clock: memory | redis
RATE_LIMIT_BACKEND = os.getenv("RATE_LIMIT_BACKEND", "memory").lower()
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
RATE_LIMIT_KEY = os.getenv("RATE_LIMIT_KEY", "aitext:last_provider_call")
