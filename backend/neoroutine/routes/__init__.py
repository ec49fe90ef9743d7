"""
API route handlers
"""
