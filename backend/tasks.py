# backend/tasks.py

"""
Background jobs of a game session.

Both jobs capture the session generation when they are spawned and go
through session methods that return False once that generation is stale
(the board was reset or discarded). A job that sees False exits for good.
"""

import asyncio
import logging

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0
LOSS_REVEAL_INITIAL_DELAY = 0.4
LOSS_REVEAL_STEP_DELAY = 0.02


async def run_timer(session, generation: int):
    """Write the elapsed seconds roughly once per second while the game is Started."""
    second = 0
    while session.tick(generation, second):
        await asyncio.sleep(TICK_INTERVAL)
        second += 1
    logger.debug("Timer for generation %d stopped at %ds", generation, second)


async def run_loss_reveal(session, generation: int, mine_indices):
    """Uncover the remaining mines one by one, then re-enable new games."""
    await asyncio.sleep(LOSS_REVEAL_INITIAL_DELAY)

    for index in mine_indices:
        if not session.reveal_mine(generation, index):
            logger.debug("Loss reveal for generation %d abandoned", generation)
            return
        await asyncio.sleep(LOSS_REVEAL_STEP_DELAY)

    session.enable_new_game(generation)
