"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the cache to the outside world (the local file system, serialization
formats, configuration files, logging) by implementing the interfaces
defined in the domain layer.
"""
