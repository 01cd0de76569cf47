"""Session relay: a WebSocket server that groups connections into sessions
and relays opaque payloads between their members, plus an asyncio client.

Server:
    relay.server.app / relay.server.create_app

Client:
    relay.client.SessionClient
"""

__version__ = "0.1.0"
