# hfc/electrons/base.py
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from hfc.nucleus.protocol import InboundFrame
from hfc.nucleus.registry import Connection


class BaseElectron(ABC):
    """
    Abstract base class for all "Electrons" (middleware components).

    An Electron is a processing unit in the pipeline that can inspect or halt
    a frame before it reaches the Nucleus (the event dispatcher).

    This class defines the contract that every electron must adhere to.
    """

    @abstractmethod
    async def process(
        self,
        frame: InboundFrame,
        connection: Connection,
        next_electron: Callable[[], Awaitable[None]],
    ) -> None:
        """
        Processes an incoming frame.

        This method must be implemented by all concrete Electron classes.

        Args:
            frame: The decoded frame to be processed.
            connection: The connection the frame arrived on.
            next_electron: An awaitable callable that invokes the next electron
                           in the pipeline. It is the responsibility of the
                           current electron to call `await next_electron()` to
                           continue the processing chain. If it is not called,
                           the chain is halted.
        """
        pass
