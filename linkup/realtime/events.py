"""Socket.IO event names shared with the frontend client."""

# Inbound (client -> server)
SETUP = "setup"
JOIN_CHAT = "join chat"
TYPING = "typing"
STOP_TYPING = "stop typing"
NEW_MESSAGE = "new message"

# Outbound (server -> client)
CONNECTED = "connected"
MESSAGE_RECEIVED = "message received"
