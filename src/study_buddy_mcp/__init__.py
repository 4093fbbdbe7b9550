"""Study buddy MCP server — summaries, key terms and quizzes from study notes via Gemini."""

__version__ = "0.1.0"
