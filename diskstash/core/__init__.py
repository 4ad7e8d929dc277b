"""Core Application Layer: the cache engine.

Composes the key codec, the cache directory and the expiry store behind the
CacheService interface.
"""
