# hfc/gateway.py
import asyncio
import logging

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from hfc.engine import PipelineEngine
from hfc.nucleus.dispatcher import EventDispatcher
from hfc.settings import Settings

logger = logging.getLogger(__name__)


class ClientGateway:
    """
    The entry point for storefront and admin clients. It accepts websocket
    connections, funnels their messages into the pipeline engine and cleans
    up presence when they close.
    """
    def __init__(self, config: Settings, pipeline: PipelineEngine, dispatcher: EventDispatcher):
        self._config = config
        self._pipeline = pipeline
        self._dispatcher = dispatcher
        logger.info("ClientGateway initialized.")

    def serve(self):
        """Returns the websocket server context manager for the configured address."""
        origins = None
        if self._config.CHECK_ORIGIN:
            # Only browsers send an Origin header; other clients are let through.
            origins = [*self._config.allowed_origins, None]
        return serve(
            self.handle_connection,
            self._config.SERVER_HOST,
            self._config.SERVER_PORT,
            origins=origins,
        )

    async def start(self):
        """Starts the WebSocket server and runs until cancelled."""
        logger.info(f"ClientGateway starting on {self._config.SERVER_HOST}:{self._config.SERVER_PORT}")
        async with self.serve():
            await asyncio.Future()  # Run forever

    async def handle_connection(self, websocket: ServerConnection):
        """
        Manages a single client connection from open to close.
        """
        logger.info(f"New connection established: {websocket.remote_address}")
        try:
            async for message in websocket:
                await self._pipeline.process_message(message, websocket)
        except ConnectionClosed as e:
            logger.info(f"Connection closed: {websocket.remote_address} ({e})")
        except Exception as e:
            logger.error(f"An unexpected error occurred in connection handler: {e}", exc_info=True)
        finally:
            removed = await self._dispatcher.disconnect(websocket)
            if removed:
                logger.info(f"Connection {websocket.remote_address} closed; offline: {', '.join(removed)}")
