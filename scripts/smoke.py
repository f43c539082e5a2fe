# scripts/smoke.py
"""
Smoke Test Script for the WordCards pipeline.

Makes real Gemini/Imagen calls, so a valid key is required.

Usage
-----
1. Single concept (one card):
    $ uv run python scripts/smoke.py

2. Category (four cards), saving the raw images next to the script:
    $ uv run python scripts/smoke.py "فواكه" --save-dir out/
"""

import argparse
import base64
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from wordcards.pipelines.flashcards import run_pipeline

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")
else:
    print("⚠️  Warning: No .env file found! Calls will fail without GEMINI_API_KEY.")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

DEFAULT_WORD = "قطة"


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run WordCards Smoke Test")
    parser.add_argument("word", nargs="?", default=DEFAULT_WORD, help="Arabic word or category")
    parser.add_argument("--save-dir", type=str, help="Directory to write decoded images into")
    args = parser.parse_args()

    print(f"\n📝 Input: {args.word}")
    print("... Invoking run_pipeline() ...")
    result = run_pipeline(args.word)

    print("\n🕵️  Transitions: " + " -> ".join(result["transitions"]))

    if result["state"] != "done":
        print(f"\n❌ Pipeline Failed: {result['error']}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print(f"✅ Pipeline Finished: {len(result['cards'])} card(s)")
    print("=" * 60)

    save_dir = Path(args.save_dir) if args.save_dir else None
    if save_dir is not None:
        save_dir.mkdir(parents=True, exist_ok=True)

    for i, card in enumerate(result["cards"], start=1):
        header, _, b64 = card["imageUrl"].partition(",")
        print(f"  {i}. {card['arabicWord']} = {card['englishTranslation']} ({header})")
        if save_dir is not None:
            path = save_dir / f"card_{i}.jpg"
            path.write_bytes(base64.b64decode(b64))
            print(f"     💾 {path}")


if __name__ == "__main__":
    main()
