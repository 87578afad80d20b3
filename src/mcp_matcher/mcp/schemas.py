"""Tool schemas for MCP server.

Defines JSON Schema for each tool's input parameters.
"""

TOOL_SCHEMAS = {
    "match_mcp": {
        "description": """Find MCPs that match a task description.

Given a natural-language description of what needs to be done, returns the single best matching MCP from the catalog and every other MCP that looks relevant, with their descriptions and function lists.

USE THIS WHEN: You need to decide which MCP to call for a task - "what's the forecast in Paris tomorrow?", "remind me to buy milk", "book a meeting on Friday".

RETURNS: A text report with a best match section and a relevant MCPs section, or "No matching MCP found." when nothing fits.""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "taskDescription": {
                    "type": "string",
                    "description": "Description of the task that needs an MCP"
                }
            },
            "required": ["taskDescription"]
        }
    },
}
