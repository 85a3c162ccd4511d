#!/usr/bin/env python3
"""Basic usage example"""

import asyncio

from eventlog_module import LoggerBuilder
from eventlog_module.safety import CrashHooks


async def serve(log):
    db = log.derive({"source": "db"})
    db.info("connected")
    db.trace("pool statistics", {"size": 4})   # hidden at level 0
    log.info({"request": "/health", "status": 200}, source="web")

    try:
        raise ConnectionError("upstream reset")
    except ConnectionError:
        log.exception("request failed", source="web")

    log.error("disk almost full", directives={"alert": True, "template": "disk"})

    # Events above are delivered together on the next loop tick
    await asyncio.sleep(0)


def main():
    # Console only: flushed synchronously
    console = (LoggerBuilder()
        .with_name("example")
        .with_context(service="api")
        .with_console(colored=True)
        .build())
    console.info("Application started")

    # Asynchronous logger with type and field filters
    log = (LoggerBuilder()
        .with_name("example-async")
        .with_context(service="api")
        .with_filter("type=!debug/source=db:5,web")
        .with_sync(False)
        .add_sink(console.sinks[0])
        .with_directive_handler(lambda event: print("directives:", dict(event.directives)))
        .build())

    CrashHooks.install(log)
    asyncio.run(serve(log))

    log.shutdown()
    console.shutdown()


if __name__ == "__main__":
    main()
