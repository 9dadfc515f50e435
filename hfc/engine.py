# hfc/engine.py
import logging
from typing import Awaitable, Callable, List, Union

from hfc.electrons.base import BaseElectron
from hfc.nucleus.protocol import FrameError, InboundFrame, parse_frame
from hfc.nucleus.registry import Connection

logger = logging.getLogger(__name__)


class PipelineEngine:
    """
    The engine that runs the middleware pipeline for each inbound frame.

    It takes a list of Electrons (middleware) and a final Nucleus handler,
    and chains them together to process incoming messages.
    """

    def __init__(
        self,
        electrons: List[BaseElectron],
        nucleus_handler: Callable[[InboundFrame, Connection], Awaitable[None]],
    ):
        self._electrons = electrons
        self._nucleus_handler = nucleus_handler
        logger.info(f"PipelineEngine initialized with {len(self._electrons)} electrons.")

    async def process_message(self, message: Union[str, bytes], connection: Connection) -> None:
        """
        Decodes one raw message and runs it through the pipeline.

        Malformed frames and handler errors are logged and swallowed so that a
        single bad event never takes the connection down.
        """
        try:
            frame = parse_frame(message)
        except FrameError as e:
            logger.warning(f"Dropped malformed frame from {getattr(connection, 'remote_address', None)}: {e}")
            return

        try:
            await self._execute_pipeline(frame, connection)
        except Exception as e:
            logger.error(f"Error processing '{frame.event}' frame: {e}", exc_info=True)

    async def _execute_pipeline(self, frame: InboundFrame, connection: Connection) -> None:
        """
        Constructs and executes the chain of electron calls for a single frame.
        """
        # The nucleus handler is the final step in the chain.
        async def nucleus():
            await self._nucleus_handler(frame, connection)

        next_handler = nucleus

        # Wrap the handlers in reverse order. Each electron gets the *next*
        # handler in the chain as an argument.
        for electron in reversed(self._electrons):
            def create_closure(current_electron, next_step):
                async def closure():
                    await current_electron.process(frame, connection, next_step)
                return closure

            next_handler = create_closure(electron, next_handler)

        await next_handler()
