"""
Authentication service for the login backend.

This module provides:
- User registration and login
- bcrypt password hashing
- JWT token issuing and verification
- Bearer-token middleware for protected routes
"""
