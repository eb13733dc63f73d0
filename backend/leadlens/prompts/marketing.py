"""
Marketing Tool Prompts

One-shot marketing generators. The repurposing and SEO tools work on
user-supplied source text and require it.
"""
from .catalog import ToolField, ToolSpec, ToolSurface, register

AD_PLATFORMS = ("Google Ads", "Meta (Facebook/Instagram)", "LinkedIn Ads")

AD_COPY_ROLE = """You are a performance marketing copywriter. Write ad copy for the offering described in the project context, for the platform named in the tool inputs."""

AD_COPY_REQUIREMENTS = """Produce these numbered sections:
1. Headlines: 3 variations (for Google Ads keep each under 30 characters)
2. Descriptions or primary text: 2 variations (for Google Ads keep each under 90 characters)
3. Call-to-action suggestions: 2
4. A/B test ideas: 3-5, each naming the variable being tested"""

CALENDAR_ROLE = """You are a content marketing manager. Plan a content calendar for the project described in the project context."""

CALENDAR_REQUIREMENTS = """Cover 4 weeks. For each week list 3 posts with:
- Channel
- Working title
- One-sentence angle grounded in the project context

Use nested lists only, never a table."""

NEWSLETTER_ROLE = """You are a newsletter editor. Turn the project context into a conversion-focused newsletter issue."""

NEWSLETTER_REQUIREMENTS = """Include:
- Subject line (under 60 characters)
- Preview text (under 90 characters)
- 2-3 short sections with headings
- One call-to-action

Keep the body under 400 words."""

LANDING_PAGE_ROLE = """You are a conversion copywriter. Write landing page copy for the offering described in the project context."""

LANDING_PAGE_REQUIREMENTS = """Produce these numbered sections:
1. Hero headline (under 12 words)
2. Subheadline (under 25 words)
3. 3 benefit blocks, each with a title and one sentence
4. Social proof, only if testimonials or customers are named in the context
5. Primary call-to-action"""

REPURPOSER_ROLE = """You are a content strategist. Repurpose the source text in the tool inputs into multiple formats for the project described in the project context."""

REPURPOSER_REQUIREMENTS = """Produce these numbered sections:
1. LinkedIn post (under 150 words)
2. X thread (exactly 5 posts, each under 280 characters)
3. Email snippet (under 80 words)
4. Short blog introduction (under 120 words)

Keep every claim traceable to the source text or the project context."""

SEO_ROLE = """You are a senior SEO strategist. Optimize the source copy in the tool inputs for search while keeping it accurate to the project context."""

SEO_REQUIREMENTS = """Produce these numbered sections:
1. Primary keyword and 3-5 secondary keywords
2. Title tag (under 60 characters)
3. Meta description (under 155 characters)
4. Rewritten copy with the keywords placed naturally
5. 3-5 A/B test ideas for the title and meta description"""

TARGETING_ROLE = """You are a demand generation strategist. Identify the ideal customer segments for the offering described in the project context."""

TARGETING_REQUIREMENTS = """Produce 2-4 segments. For each segment give:
- Who they are
- The pain point from the context that applies to them
- Best channels to reach them
- A one-line messaging angle"""

BRAND_ROLE = """You are a brand strategist. Develop consistent messaging for the project described in the project context."""

BRAND_REQUIREMENTS = """Produce these numbered sections:
1. Positioning statement (one sentence)
2. 3 value propositions
3. Tone of voice guidelines (3-5 bullet points)
4. 3 tagline options"""

EMAIL_CAMPAIGN_ROLE = """You are an email marketing specialist. Write an email campaign for the project described in the project context."""

EMAIL_CAMPAIGN_REQUIREMENTS = """Produce exactly 3 emails as a numbered list. For each email give:
- Send timing
- Subject line
- Body under 150 words
- Call-to-action"""

PERFORMANCE_ROLE = """You are a marketing analyst. Review the campaign information in the tool inputs and the project context and recommend optimizations."""

PERFORMANCE_REQUIREMENTS = """Produce these numbered sections:
1. What the numbers show (only numbers that were provided)
2. Likely causes, marked as hypotheses
3. 3-5 prioritized optimizations
4. 3-5 A/B test ideas

If no campaign numbers were provided, say so in section 1."""

register(
    ToolSpec(
        kind="ad-copy",
        surface=ToolSurface.MARKETING,
        name="Ad Copy Assistant",
        description="Ad copy for Google, Meta and LinkedIn",
        role=AD_COPY_ROLE,
        requirements=AD_COPY_REQUIREMENTS,
        instruction="Write the ad copy now.",
        fields=(ToolField("platform", "Platform", default="Google Ads", choices=AD_PLATFORMS),),
    ),
    ToolSpec(
        kind="content-calendar",
        surface=ToolSurface.MARKETING,
        name="Content Calendar Generator",
        description="A four-week content plan",
        role=CALENDAR_ROLE,
        requirements=CALENDAR_REQUIREMENTS,
        instruction="Write the content calendar now.",
    ),
    ToolSpec(
        kind="newsletter",
        surface=ToolSurface.MARKETING,
        name="Newsletter Wizard",
        description="Updates turned into a newsletter issue",
        role=NEWSLETTER_ROLE,
        requirements=NEWSLETTER_REQUIREMENTS,
        instruction="Write the newsletter now.",
    ),
    ToolSpec(
        kind="landing-page",
        surface=ToolSurface.MARKETING,
        name="Landing Page Writer",
        description="Landing page copy that converts",
        role=LANDING_PAGE_ROLE,
        requirements=LANDING_PAGE_REQUIREMENTS,
        instruction="Write the landing page copy now.",
    ),
    ToolSpec(
        kind="content-repurposer",
        surface=ToolSurface.MARKETING,
        name="Content Repurposer",
        description="One piece of content in several formats",
        role=REPURPOSER_ROLE,
        requirements=REPURPOSER_REQUIREMENTS,
        instruction="Repurpose the source text now.",
        fields=(ToolField("source_text", "Source text", required=True, multiline=True),),
    ),
    ToolSpec(
        kind="seo-optimizer",
        surface=ToolSurface.MARKETING,
        name="SEO Optimizer",
        description="Search-optimized rewrite of existing copy",
        role=SEO_ROLE,
        requirements=SEO_REQUIREMENTS,
        instruction="Optimize the source copy now.",
        fields=(ToolField("source_copy", "Source copy", required=True, multiline=True),),
    ),
    ToolSpec(
        kind="targeting-strategy",
        surface=ToolSurface.MARKETING,
        name="Targeting Strategy",
        description="Ideal customer segments and channels",
        role=TARGETING_ROLE,
        requirements=TARGETING_REQUIREMENTS,
        instruction="Write the targeting strategy now.",
    ),
    ToolSpec(
        kind="brand-messaging",
        surface=ToolSurface.MARKETING,
        name="Brand Messaging",
        description="Positioning, value propositions and taglines",
        role=BRAND_ROLE,
        requirements=BRAND_REQUIREMENTS,
        instruction="Write the brand messaging now.",
    ),
    ToolSpec(
        kind="email-campaign",
        surface=ToolSurface.MARKETING,
        name="Email Campaign",
        description="A three-email campaign",
        role=EMAIL_CAMPAIGN_ROLE,
        requirements=EMAIL_CAMPAIGN_REQUIREMENTS,
        instruction="Write the email campaign now.",
    ),
    ToolSpec(
        kind="performance-analysis",
        surface=ToolSurface.MARKETING,
        name="Performance Analysis",
        description="Campaign review and optimizations",
        role=PERFORMANCE_ROLE,
        requirements=PERFORMANCE_REQUIREMENTS,
        instruction="Write the performance analysis now.",
        fields=(ToolField("campaign_metrics", "Campaign metrics", multiline=True),),
    ),
)
