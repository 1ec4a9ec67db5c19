# Middleware package init
"""
hnote Backend — Middleware Package
===================================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: one access line with status and duration
"""
