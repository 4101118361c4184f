"""Security primitives for an emitter publish/subscribe broker."""

__version__ = "0.1.0"