"""
Sales Tool Prompts

One-shot sales generators. Relationship and email tools have no hard-required
field beyond the selected project.
"""
from .catalog import ToolField, ToolSpec, ToolSurface, register

COLD_EMAIL_ROLE = """You are a cold-outreach copywriter. Write a cold outreach email that introduces the offering described in the project context to the lead described in the project context. The goal is to generate interest or schedule a demo."""

COLD_EMAIL_REQUIREMENTS = """Include the following:
- A strong subject line that grabs attention
- A personalized opening line that relates to the reader's role or challenge
- A concise explanation of what the offering does and how it can help
- 2-3 value-driven bullet points or benefits
- A non-pushy call-to-action (such as inviting them to book a quick call or reply if interested)

Keep the tone approachable and professional.
Keep the email between 100 and 120 words, never more than 120.
Avoid jargon, keep it human, and make it feel like it was written just for the recipient."""

PITCH_DECK_ROLE = """You are a pitch strategist. Generate a professional 10-slide pitch deck outline for the offering described in the project context."""

PITCH_DECK_REQUIREMENTS = """The deck must contain exactly these numbered sections:
1. Problem
2. Solution
3. Product Overview
4. Market Opportunity
5. Business Model
6. Traction
7. Marketing & Sales Strategy
8. Competitive Advantage
9. Team
10. Ask / Funding Needs

Instructions:
- Add 2-4 short bullet points under each slide for easy presentation
- If the context has nothing for a slide, write "Not covered by the project context" under it
- Tone: professional, confident, clear"""

CALL_SCRIPT_ROLE = """You are a sales enablement coach. Generate a sales call script for a representative calling the lead described in the project context."""

CALL_SCRIPT_REQUIREMENTS = """Structure the script in these numbered sections:
1. Friendly opening
2. Qualifying questions (4-6)
3. Brief pitch
4. Objection handling tips (at least 3 objections with responses)
5. Closing lines to schedule a follow-up meeting

Keep it conversational, natural, and adaptable for a 5-7 minute call."""

LINKEDIN_ROLE = """You are a social selling specialist. Generate a thoughtful LinkedIn comment and a follow-up direct message for engaging the lead described in the project context. The goal is to start a professional relationship by providing value or insight, not by pitching directly."""

LINKEDIN_REQUIREMENTS = """Constraints:
- Label the two parts "Comment" and "Direct Message"
- Keep the comment under 100 words
- Keep the direct message under 100 words
- Avoid sounding like a template or a pitch
- Show real engagement and offer to continue the conversation"""

BATTLECARD_ROLE = """You are a competitive intelligence analyst. Generate a concise sales battlecard to help a rep handle objections when selling the offering described in the project context."""

BATTLECARD_REQUIREMENTS = """Include these numbered sections:
1. Key differentiators
2. Common objections and suggested rebuttals
3. One-line competitive positioning against the top 2 competitors, only if competitors are named in the context

Tone: sharp, persuasive, and easy to scan during live calls."""

FOLLOW_UP_ROLE = """You are a sales copywriter. Write a follow-up email to the lead described in the project context after an earlier touchpoint."""

FOLLOW_UP_REQUIREMENTS = """Include:
- A short subject line
- A reference to the earlier interaction if one is described
- One new piece of value drawn from the project context
- A single clear next step

Keep the email under 120 words."""

NURTURE_ROLE = """You are an account manager focused on long-term relationships. Plan a relationship-nurture sequence for the lead described in the project context."""

NURTURE_REQUIREMENTS = """Produce exactly 3 touchpoints as a numbered list. For each touchpoint give:
- Timing (days after the previous touch)
- Channel
- The message or action, under 60 words
- Why it is relevant, citing the project context"""

register(
    ToolSpec(
        kind="cold-email",
        surface=ToolSurface.SALES,
        name="Cold Email Generator",
        description="Personalized cold emails grounded in the lead's context",
        role=COLD_EMAIL_ROLE,
        requirements=COLD_EMAIL_REQUIREMENTS,
        instruction="Write the cold outreach email now.",
        fields=(ToolField("recipient_role", "Recipient role"),),
    ),
    ToolSpec(
        kind="pitch-deck",
        surface=ToolSurface.SALES,
        name="Pitch Deck Generator",
        description="A 10-slide pitch deck outline",
        role=PITCH_DECK_ROLE,
        requirements=PITCH_DECK_REQUIREMENTS,
        instruction="Write the pitch deck outline now.",
        fields=(ToolField("audience", "Audience", default="Investors"),),
    ),
    ToolSpec(
        kind="call-scripts",
        surface=ToolSurface.SALES,
        name="Call Script Generator",
        description="Discovery and demo call scripts",
        role=CALL_SCRIPT_ROLE,
        requirements=CALL_SCRIPT_REQUIREMENTS,
        instruction="Write the call script now.",
        fields=(ToolField("call_goal", "Call goal", default="Book a follow-up demo"),),
    ),
    ToolSpec(
        kind="linkedin-outreach",
        surface=ToolSurface.SALES,
        name="LinkedIn Outreach",
        description="A comment and a DM that open a relationship",
        role=LINKEDIN_ROLE,
        requirements=LINKEDIN_REQUIREMENTS,
        instruction="Write the LinkedIn comment and direct message now.",
    ),
    ToolSpec(
        kind="battlecards",
        surface=ToolSurface.SALES,
        name="Sales Battlecards",
        description="Differentiators and objection handling",
        role=BATTLECARD_ROLE,
        requirements=BATTLECARD_REQUIREMENTS,
        instruction="Write the battlecard now.",
    ),
    ToolSpec(
        kind="follow-up-email",
        surface=ToolSurface.SALES,
        name="Follow-up Email",
        description="A short follow-up after a touchpoint",
        role=FOLLOW_UP_ROLE,
        requirements=FOLLOW_UP_REQUIREMENTS,
        instruction="Write the follow-up email now.",
        fields=(ToolField("previous_interaction", "Previous interaction", multiline=True),),
    ),
    ToolSpec(
        kind="relationship-nurture",
        surface=ToolSurface.SALES,
        name="Relationship Nurture Plan",
        description="A three-touch nurture sequence",
        role=NURTURE_ROLE,
        requirements=NURTURE_REQUIREMENTS,
        instruction="Write the nurture sequence now.",
    ),
)
