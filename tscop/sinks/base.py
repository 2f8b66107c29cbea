"""
Sink interface.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from ..lineprotocol.format import EncodedRecord


class Sink(ABC):
    """A destination that accepts batches of encoded records."""

    @abstractmethod
    def write_batch(self, batch: Sequence[EncodedRecord]) -> None:
        """Write one batch. Raises SinkError on failure."""

    def close(self) -> None:
        """Release resources owned by the sink."""

    def __enter__(self) -> 'Sink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ['Sink']
