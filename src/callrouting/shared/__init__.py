"""
Shared infrastructure: structured logging.
"""
