"""
Core definitions shared by every layer: phases, teams, errors and the message taxonomy.
"""
