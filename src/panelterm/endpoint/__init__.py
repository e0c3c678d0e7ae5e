"""Local stand-in execution backend for panelterm.

A temporary software stand-in for the tenant container service. Serves
the terminal wire contract over a WebSocket and runs commands in a local
workspace directory.
"""
