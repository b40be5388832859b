"""Protean Engine runner for the storefront domain.

Only needed when events are processed asynchronously (the ``production``
overlay): the Engine drains the outbox and runs the notification event
handlers off the request path. With ``sync`` processing, the default, events
are handled as soon as their unit of work commits and no Engine is needed.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import asyncio

from protean.server.engine import Engine


async def run():
    from storefront.domain import storefront

    storefront.init()
    await Engine(storefront).run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
