"""
Minimal one-call smoke test to verify access to the configured provider.

Usage:
  export RESUMEAI_API_KEY=your_key
  python scripts/provider_smoke.py --model claude-3-haiku
"""
import argparse
import logging
import sys
from pathlib import Path

# Ensure repository root is on sys.path for local execution.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.store import settings_from_env
from llm.client import ProviderGateway
from llm.providers import resolve_model
from schemas.chat import ChatMessage, ChatRole


def main():
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Provider smoke test (single call).")
    parser.add_argument("--model", default=None, help="Model id to test (overrides RESUMEAI_MODEL).")
    args = parser.parse_args()

    settings = settings_from_env()
    if args.model:
        settings = settings.parse_obj({**settings.dict(), "ai_model": args.model})
    if not settings.api_key:
        raise SystemExit("Set RESUMEAI_API_KEY before running this script.")

    resolved = resolve_model(settings.ai_model)
    print(f"Provider: {resolved.family.vendor}, model: {resolved.model}")

    messages = [ChatMessage(role=ChatRole.USER, content="Say a short greeting with exactly 3 words.")]
    result = ProviderGateway().complete(messages, settings)
    if not result.ok:
        raise SystemExit(str(result.error))
    print("Response:", result.text)


if __name__ == "__main__":
    main()
