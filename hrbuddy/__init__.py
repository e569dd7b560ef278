"""
HR Buddy Backend.

Core components:
- api: FastAPI routes for applicants, search, email, MCP and webhooks
- services: MCP service, Gemini prompts, search and workflows
- tools: MCP, SendGrid, storage and PDF clients
- db: SQLAlchemy tables
"""

__version__ = "0.1.0"
