#!/usr/bin/env python3
"""
Smoke test of the answer pipeline against the live index.

Run (after `python -m faq_assistant.presentation.cli ingest`):
  python scripts/smoke_dialog.py

Options:
  --print-answers    Print full answers
  --dialog           Also run a multi-turn dialogue with history
  --stream           Use the streaming pipeline
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from faq_assistant.config.settings import settings
from faq_assistant.container import configure_container, container
from faq_assistant.core.models.chat import ChatHistory
from faq_assistant.core.services.chat_service import ChatService
from faq_assistant.core.services.health_service import HealthService


TESTS = [
    {
        "q": "Hi there!",
        "expect_any": ["Hello", "help"],
        "expect_none": ["I'm not sure about that"],
    },
    {
        "q": "What is LASIK?",
        "expect_any": ["LASIK", "laser", "cornea"],
        "expect_none": ["I'm not sure about that"],
    },
    {
        "q": "How long is recovery after PRK?",
        "expect_any": ["PRK", "day", "week"],
    },
    {
        "q": "What's the difference between LASIK and SMILE?",
        "expect_any": ["LASIK", "SMILE"],
    },
    {
        "q": "I'm scared of the procedure.",
        "expect_any": ["understand", "normal", "common", "concern", "safe"],
    },
    {
        "q": "How much does LASIK cost?",
        "expect_any": ["cost", "price", "$", "financing", "consultation", "call"],
    },
    {
        "q": "What is the capital of France?",
        "expect_any": ["I'm not sure about that"],
        "expect_none": ["Paris"],
    },
    {
        "q": "Thanks!",
        "expect_any": ["welcome"],
    },
]

DIALOGUE = [
    "Hello",
    "What is EVO ICL?",
    "How long does it take?",
    "Is it safe?",
    "What about the cost?",
    "I've been wearing glasses for 20 years.",
    "Yes",
]


def normalize(text: str) -> str:
    return (text or "").lower().replace("’", "'")


def check_expectations(answer: str, test: dict) -> list[str]:
    errors = []
    ans = normalize(answer)

    expect_any = test.get("expect_any") or []
    expect_all = test.get("expect_all") or []
    expect_none = test.get("expect_none") or []

    if expect_any:
        if not any(normalize(x) in ans for x in expect_any):
            errors.append(f"missing any of: {expect_any}")

    for token in expect_all:
        if normalize(token) not in ans:
            errors.append(f"missing: {token}")

    for token in expect_none:
        if normalize(token) in ans:
            errors.append(f"should not contain: {token}")

    return errors


async def ask(chat_service: ChatService, question: str, history: ChatHistory, stream: bool) -> str:
    if not stream:
        response = await chat_service.answer(question, history)
        return response.answer

    parts = []
    async for event in chat_service.answer_stream(question, history):
        if event.type == "content":
            parts.append(event.content)
        elif event.type == "error":
            return event.content
    return "".join(parts)


async def run(args) -> int:
    configure_container(settings)
    container.resolve(HealthService).ensure_ready()
    chat_service = container.resolve(ChatService)

    failures = 0
    for idx, test in enumerate(TESTS, start=1):
        q = test["q"]
        print(f"\nQ{idx}: {q}")
        answer = await ask(chat_service, q, ChatHistory(), args.stream)
        if args.print_answers:
            print("A:", answer)

        errors = check_expectations(answer, test)
        if errors:
            failures += 1
            print("FAIL:", "; ".join(errors))
        else:
            print("OK")

    if failures:
        print(f"\nFAILED: {failures} test(s) failed")
        return 1
    print("\nALL OK")

    if args.dialog:
        history = ChatHistory(max_messages=settings.history_max_messages)
        print("\nDIALOGUE:\n")
        for idx, q in enumerate(DIALOGUE, start=1):
            print(f"U{idx}: {q}")
            answer = await ask(chat_service, q, history, args.stream)
            history.add_pair(q, answer)
            print(f"A{idx}: {answer}\n")
    return 0


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--print-answers", action="store_true")
    parser.add_argument("--dialog", action="store_true")
    parser.add_argument("--stream", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
