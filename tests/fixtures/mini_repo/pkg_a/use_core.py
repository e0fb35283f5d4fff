"""Use core module from a second file."""

import logging

from pkg_a.core import Greeter, compute_value

logger = logging.getLogger(__name__)

__all__ = ["run"]


async def run(client) -> str:
    greeter = Greeter.default()
    rows = await client.table("users").select("id", limit=10).execute()
    logger.info("fetched %d rows", len(rows))
    return f"{greeter.greet('fixture')}::{compute_value(2, scale=3)}"
