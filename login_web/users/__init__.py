"""
User profile endpoints for the login service.
"""
