"""panelterm -- Remote command terminal for a hosting control panel.

This package implements the interactive command-execution session of
the panel: an authenticated, persistent channel to a tenant's sandboxed
environment, with single-flight command execution, live streamed output,
and a sanitized echo of what actually runs.
"""

__version__ = "0.1.0"
