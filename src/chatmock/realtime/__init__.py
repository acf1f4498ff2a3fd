"""Real-time surfaces — browser chat socket and EventSub bot socket.

Learn: Both sockets are thin. They wrap the connection in a Peer, tell the
relay coordinator about it, and then run two tasks side by side:
1. Writer — drains the peer's outbox onto the socket
2. Reader — turns inbound frames into relay calls (or ignores them)
"""
