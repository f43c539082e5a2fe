"""
ASGI Entry Point for the WordCards API.

Loads `.env` before the application factory runs so that settings and the
LLM client see the credentials.

Usage
-----
    $ python -m wordcards.api.server

Or via uvicorn directly:
    $ uvicorn wordcards.api.server:app --reload
"""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from wordcards.api.app import create_app

load_dotenv(dotenv_path=Path(".env"))

app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    key = os.getenv("GEMINI_API_KEY", "") or os.getenv("GOOGLE_API_KEY", "")
    if key:
        print(f"[Server] GEMINI_API_KEY : ✅ Loaded ({key[:8]}...)")
    else:
        print("[Server] GEMINI_API_KEY : ❌ Missing (generation requests will fail)")

    uvicorn.run(
        "wordcards.api.server:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
