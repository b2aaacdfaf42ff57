"""
Socket.IO handlers and inbound message routing.
"""
