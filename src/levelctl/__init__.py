"""levelctl -- Remote volume and brightness control daemon.

This package implements a small always-on WebSocket server that accepts
short text commands (``a_5``, ``b_7``) from a remote client and applies
them to the local machine's output volume or display backlight. The
server supervises its own listener and rebuilds it after transport
failures until it is told to shut down.
"""

__version__ = "0.1.0"
