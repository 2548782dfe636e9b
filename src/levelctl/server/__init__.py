"""Resilient WebSocket session server for levelctl.

Binds the control endpoint, runs one session handler per client
connection, and supervises the listener so that it is rebuilt after
transport failures until the shutdown token is tripped.
"""
