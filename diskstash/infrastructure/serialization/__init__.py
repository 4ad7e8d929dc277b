"""Concrete Serializer implementations and a name-based lookup."""

from diskstash.infrastructure.serialization.codecs import (
    CallableSerializer,
    JsonSerializer,
    PickleSerializer,
    YamlSerializer,
    get_serializer,
)

__all__ = [
    "CallableSerializer",
    "JsonSerializer",
    "PickleSerializer",
    "YamlSerializer",
    "get_serializer",
]
