# hfc/main.py
import asyncio
import logging

from hfc.settings import settings
from hfc.engine import PipelineEngine
from hfc.gateway import ClientGateway
from hfc.electrons.logger import LoggerElectron
from hfc.electrons.sender_binding import SenderBindingElectron
from hfc.nucleus.dispatcher import EventDispatcher
from hfc.nucleus.registry import PresenceRegistry
from hfc.nucleus.router import MessageRouter
from hfc.nucleus.state import BaseState, MemoryState, RedisState


def build_state(mirror: str) -> BaseState:
    if mirror == "redis":
        return RedisState()
    if mirror != "memory":
        raise ValueError(f"Unknown PRESENCE_MIRROR '{mirror}', expected 'memory' or 'redis'.")
    return MemoryState()


async def main():
    """
    The main entry point for the real-time messaging server.
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] (%(name)s) %(message)s"
    )
    logger = logging.getLogger("HFC_Main")

    # 1. Initialize all Nucleus components
    logger.info("Initializing Nucleus components...")
    state = build_state(settings.PRESENCE_MIRROR)
    if isinstance(state, RedisState):
        await state.clear()

    registry = PresenceRegistry()
    router = MessageRouter(registry)
    dispatcher = EventDispatcher(
        registry,
        router,
        state,
        cleanup_on_disconnect=settings.CLEANUP_ON_DISCONNECT,
    )

    # 2. Define the list of active electrons.
    active_electrons = [
        LoggerElectron(),
        SenderBindingElectron(registry),
    ]

    # 3. Create the pipeline engine with the dispatcher as its final step.
    pipeline_engine = PipelineEngine(
        electrons=active_electrons,
        nucleus_handler=dispatcher.handle,
    )

    client_gateway = ClientGateway(settings, pipeline_engine, dispatcher)

    logger.info("Starting real-time messaging server... Now accepting client connections.")
    await client_gateway.start()


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nServer is shutting down.")


if __name__ == "__main__":
    run()
