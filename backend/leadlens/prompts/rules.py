"""
Grounding Rules

Fixed text blocks shared by every tool prompt. The preamble and the
insufficiency clause are emitted verbatim; tests match on them.
"""

GLOBAL_RULES = """CRITICAL INSTRUCTIONS - READ CAREFULLY:
1. You MUST ONLY use information from the project context provided below
2. DO NOT make up, invent, or assume any facts that are not explicitly provided
3. If the project context does not contain the information you need, say so explicitly
4. DO NOT reference any projects, companies, people, or details not mentioned in the context
5. Do not use em dashes anywhere, use regular hyphens (-) instead
6. Do not use emojis
7. Always use a natural, human-like tone
8. Do not generate tables, use bullet points or numbered lists instead"""

INSUFFICIENT_CONTEXT_CLAUSE = (
    "If the project context does not contain enough information to complete this request, "
    "explicitly state that the available project context is insufficient instead of improvising."
)

NO_CONTEXT_NOTICE = """NOTE: No context items have been added to this project.
You have no verified facts about this lead or campaign beyond the project record above.
""" + INSUFFICIENT_CONTEXT_CLAUSE

PERSONA_MARKER = "Your Role Context:"

PERSONA_BLOCK = PERSONA_MARKER + """
- Name: {persona_name}
- Title: {role_title}
- Company: {company}
- Industry: {industry}
- Description: {description}

Write from the perspective of this role and tailor the output accordingly."""

PROJECT_BLOCK = """PROJECT INFORMATION (USE ONLY THIS INFORMATION):
Project Overview:
- Name: {name}
- Description: {description}
- Lead Source: {lead_source}
- Priority: {priority}
- Status: {status}
- AI Summary: {summary}"""

MISSING_PROJECT_BLOCK = """PROJECT INFORMATION (USE ONLY THIS INFORMATION):
Project Information:
- Project ID: {project_id}
- Note: Basic project details are not available, but detailed context is provided below"""

NO_PROJECT_BLOCK = """PROJECT INFORMATION (USE ONLY THIS INFORMATION):
No project information is available."""

HISTORY_HEADING = "Previous Conversation:"

HINT_HEADING = "Additional Instructions From The User:"

CLOSING = """STRICT REQUIREMENT: Your response must be based entirely on the project information provided above. {clause}

Reference the actual project name "{project_name}" and use only the details from the project context."""
