import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS - comma separated list of origins allowed to call the API
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

# Node identity - every generated id starts with this prefix
NODE_ID_PREFIX = os.getenv("NODE_ID_PREFIX", "node_")

# Document defaults used by the schema and the template catalog
DEFAULT_BODY_WIDTH = os.getenv("DEFAULT_BODY_WIDTH", "600px")
DEFAULT_BREAKPOINT = os.getenv("DEFAULT_BREAKPOINT", "480px")

# Largest markup payload accepted by the API (characters)
MAX_MARKUP_LENGTH = int(os.getenv("MAX_MARKUP_LENGTH", "2000000"))

# Rewrite components the mjml engine cannot render (accordion, carousel)
# into static table HTML before compiling
LOWER_INTERACTIVE_COMPONENTS = os.getenv("LOWER_INTERACTIVE_COMPONENTS", "true").lower() == "true"
