import asyncio
import json
import logging
import sys

from faq_assistant.config.settings import settings
from faq_assistant.container import configure_container, container
from faq_assistant.core.exceptions import EmptyQuestionError, IndexNotReadyError
from faq_assistant.core.services.chat_service import ChatService
from faq_assistant.core.services.health_service import HealthService
from faq_assistant.core.services.ingest_service import IngestService

logger = logging.getLogger(__name__)

USAGE = """Usage: python -m faq_assistant.presentation.cli <command>
Commands:
  ingest                      rebuild the vector index from content files
  ask "<question>" [--stream] answer one question
  health                      check LLM and vector store"""


def cmd_ingest() -> int:
    """Ingest command - index content only."""
    ingest_service = container.resolve(IngestService)
    stats = asyncio.run(ingest_service.run())
    logger.info(f"Indexed {stats.chunks} chunks from {stats.files} files")
    return 0


async def _ask(question: str, stream: bool) -> int:
    chat_service = container.resolve(ChatService)

    if not stream:
        response = await chat_service.answer(question)
        print(response.answer)
        if response.suggestions:
            print("\nYou might also ask:")
            for suggestion in response.suggestions:
                print(f"  - {suggestion}")
        logger.debug(json.dumps(response.to_dict(), indent=2))
        return 0

    async for event in chat_service.answer_stream(question):
        if event.type == "content":
            print(event.content, end="", flush=True)
        elif event.type == "error":
            print(event.content)
        else:
            print()
            for suggestion in (event.payload or {}).get("suggestions") or []:
                print(f"  - {suggestion}")
    return 0


def cmd_ask(args: list[str]) -> int:
    """Ask command - answer one question against the index."""
    stream = "--stream" in args
    words = [a for a in args if a != "--stream"]

    try:
        container.resolve(HealthService).ensure_ready()
        return asyncio.run(_ask(" ".join(words), stream))
    except (EmptyQuestionError, IndexNotReadyError) as e:
        logger.error(str(e))
        return 1


def cmd_health() -> int:
    """Health command - report backend reachability."""
    status = asyncio.run(container.resolve(HealthService).check())
    print(json.dumps(status.to_dict(), indent=2))
    return 0 if status.healthy else 1


def main():
    """CLI entry point."""
    logging.basicConfig(level=settings.log_level.upper(), format="%(message)s")

    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    command = sys.argv[1]
    configure_container(settings)

    if command == "ingest":
        sys.exit(cmd_ingest())
    elif command == "ask":
        sys.exit(cmd_ask(sys.argv[2:]))
    elif command == "health":
        sys.exit(cmd_health())
    else:
        print(f"Unknown command: {command}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
