"""
Shared utilities: exceptions, logging and validation
"""
