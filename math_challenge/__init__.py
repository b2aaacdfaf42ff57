"""
Math Challenge - a real-time, team-based arithmetic quiz server.
"""
