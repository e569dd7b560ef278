"""
Clients for external services.

- mcp_client: Generic MCP session and tool calls
- clickup: ClickUp MCP operations
- neon: Neon database MCP operations
- email: SendGrid email delivery
- file_storage: Resume storage
- pdf_parser: Extract text from PDF resumes
"""
