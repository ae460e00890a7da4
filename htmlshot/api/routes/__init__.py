"""
API Routes
==========

- screenshot: Screenshot generation and markup lint endpoints
- health: Health check endpoint
"""
