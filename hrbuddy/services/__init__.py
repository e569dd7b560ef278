"""
Application services.

- mcp_service: Lazily connected ClickUp and Neon MCP sessions
- ai_service: Gemini prompts for analysis, summaries, emails and search
- search: Query filters over applications
- analysis: Resume analysis for applications
- workflow: Applicant stage workflow
"""
