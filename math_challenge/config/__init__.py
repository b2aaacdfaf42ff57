"""
Game rule settings derived from the application configuration.
"""
