from __future__ import annotations
import os
from dotenv import load_dotenv

# Load .env if present
load_dotenv()

# Chat model served by Ollama (pull it first with `ollama pull`)
MODEL = os.getenv("DISINFO_MODEL", "llama3.1:8b")
OLLAMA_URL = os.getenv("DISINFO_OLLAMA_URL", "http://localhost:11434")

# Seconds before the classifier call is abandoned
LLM_TIMEOUT = float(os.getenv("DISINFO_LLM_TIMEOUT", "60"))

# Reddit JSON is fetched through this proxy; set it empty to fetch directly
PROXY_URL = os.getenv("DISINFO_PROXY_URL", "https://api.allorigins.win/get")
FETCH_TIMEOUT = float(os.getenv("DISINFO_FETCH_TIMEOUT", "15"))

# Longest content (in characters) sent to the classifier
MAX_CONTENT_CHARS = int(os.getenv("DISINFO_MAX_CHARS", "10000"))

# Analysis history (JSON key-value file)
HISTORY_PATH = os.getenv("DISINFO_HISTORY_PATH", "./data/history.json")
HISTORY_LIMIT = int(os.getenv("DISINFO_HISTORY_LIMIT", "5"))
