"""
Tail live events from a Seq server.

Follows the root document's links: the server advertises where the event
stream lives and which filter parameters it accepts.

Run with a profile from seq_config.yaml:
    python examples/tail_events.py local "@Level = 'Error'"
"""

import asyncio
import logging
import sys

from setup_logging import setup_logging

from seqapi import SeqApiClient, SeqApiError

logger = logging.getLogger("seqapi.examples")


async def main(profile: str, filter_expression: str | None) -> None:
    async with SeqApiClient.from_config(profile) as client:
        root = await client.get_root()
        logger.info(f"Connected to {root.product} {root.version}")

        parameters = {"filter": filter_expression} if filter_expression else None
        try:
            events = await client.stream_text(root, "EventsStream", parameters)
        except SeqApiError as e:
            logger.error(f"Server refused the stream ({e.status_code}): {e}")
            return

        async with events:
            async for frame in events:
                print(frame)


if __name__ == "__main__":
    setup_logging()
    profile = sys.argv[1] if len(sys.argv) > 1 else "local"
    filter_expression = sys.argv[2] if len(sys.argv) > 2 else None
    try:
        asyncio.run(main(profile, filter_expression))
    except KeyboardInterrupt:
        pass
