"""Serializers for cached values.

Pickle is the default because it round-trips arbitrary Python objects; JSON
and YAML trade generality for a portable, human-readable payload.
"""

import json
import pickle
from typing import Any, Callable, Dict

import yaml

from diskstash.domain.interfaces.serializer import Serializer


class PickleSerializer(Serializer):
    """Serializes any picklable Python object."""

    name = "pickle"

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol

    def encode(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=self.protocol)

    def decode(self, data: bytes) -> Any:
        return pickle.loads(data)


class JsonSerializer(Serializer):
    """UTF-8 JSON. Tuples come back as lists."""

    name = "json"

    def __init__(self, sort_keys: bool = False):
        self.sort_keys = sort_keys

    def encode(self, value: Any) -> bytes:
        # allow_nan=False keeps the output strict JSON
        return json.dumps(value, sort_keys=self.sort_keys, allow_nan=False).encode("utf-8")

    def decode(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))


class YamlSerializer(Serializer):
    """YAML via PyYAML's safe dumper and loader."""

    name = "yaml"

    def encode(self, value: Any) -> bytes:
        return yaml.safe_dump(value, allow_unicode=True, sort_keys=False).encode("utf-8")

    def decode(self, data: bytes) -> Any:
        return yaml.safe_load(data.decode("utf-8"))


class CallableSerializer(Serializer):
    """Wraps an injected encode/decode function pair."""

    name = "callable"

    def __init__(self, encode: Callable[[Any], bytes], decode: Callable[[bytes], Any]):
        self._encode = encode
        self._decode = decode

    def encode(self, value: Any) -> bytes:
        data = self._encode(value)
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"encode function returned {type(data).__name__}, expected bytes")
        return bytes(data)

    def decode(self, data: bytes) -> Any:
        return self._decode(data)


_REGISTRY: Dict[str, Callable[[], Serializer]] = {
    PickleSerializer.name: PickleSerializer,
    JsonSerializer.name: JsonSerializer,
    YamlSerializer.name: YamlSerializer,
}


def get_serializer(name: str) -> Serializer:
    """Builds a serializer from its configuration name ('pickle', 'json', 'yaml')."""
    try:
        factory = _REGISTRY[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown serializer '{name}'. Expected one of: {', '.join(sorted(_REGISTRY))}"
        ) from None
    return factory()
