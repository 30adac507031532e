"""FastAPI application and REST API endpoints.

This module contains:
- Main FastAPI application configuration
- Authentication and admin authorization dependencies
- Story, parent settings, bookmark and admin endpoints
"""
