"""Interface for value serialization.

The cache never inspects values itself; it hands them to a Serializer and
stores whatever bytes come back.
"""

import abc
from typing import Any


class Serializer(abc.ABC):
    """Abstract Base Class for turning values into bytes and back."""

    #: Short name used in configuration (e.g. 'pickle', 'json').
    name: str = "abstract"

    @abc.abstractmethod
    def encode(self, value: Any) -> bytes:
        """Serializes a value.

        Raises:
            Exception: Any error signals that the value is not encodable.
        """
        pass

    @abc.abstractmethod
    def decode(self, data: bytes) -> Any:
        """Deserializes bytes produced by `encode`.

        Raises:
            Exception: Any error signals corrupt or mismatched data.
        """
        pass
