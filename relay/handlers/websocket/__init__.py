"""WebSocket gateway: admission, per-connection message loop and teardown.

The entry point is ``relay.handlers.websocket.manager.handle_websocket_connection``.
Submodules are imported directly so the registry can use the send helpers
without loading the whole gateway.
"""
