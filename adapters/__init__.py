"""
Adapter layer

Integration with external systems (the SQLite database).
"""
