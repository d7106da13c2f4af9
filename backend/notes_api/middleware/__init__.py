# Middleware package init
"""
Notes API — Middleware Package
================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: generate the correlation ID first
    2. Logging: log request details with that ID
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
