"""
Project Summary Prompt

Produces the AI summary stored on a project from its fields and context.
"""

SUMMARY_PROMPT = """Create a comprehensive context summary for this sales/marketing project.
Use only the information below. Do not use em dashes, emojis or tables.

Project Name: {name}
Description: {description}
Lead Source: {lead_source}

Context Items Added: {item_count} items
{context_details}

Generate a concise but comprehensive summary that captures:
1. The project's main objective and target
2. Key insights from analyzed websites (business type, services, opportunities)
3. Important context from uploaded files and text content
4. Any competitive advantages, pain points, or opportunities identified

If the information above is thin, say which information is missing instead of filling gaps.
Keep it under 500 words."""
