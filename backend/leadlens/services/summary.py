"""
Project Summary Service

Generates the AI summary stored on a project. When generation fails the
project still gets a deterministic summary built from its own fields.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import RecordNotFoundError
from ..generation import GenerationClient
from ..grounding import item_preview, scraped_fields
from ..llm import get_model_for_task
from ..models import ContentKind
from ..prompts.summary import SUMMARY_PROMPT
from ..tracer import trace_section, trace_call, trace_result
from .records import get_project, list_context_items

logger = logging.getLogger(__name__)


def build_fallback_summary(project, items) -> str:
    """Summary built only from stored fields, used when generation fails."""
    summary = (
        f"Project: {project.name}. "
        f"Description: {project.description or 'N/A'}. "
        f"Lead Source: {project.lead_source or 'N/A'}. "
        f"Context items: {len(items)}."
    )

    websites = []
    for item in items:
        if item.content_type != ContentKind.URL:
            continue
        scraped = scraped_fields(item.item_metadata)
        title = scraped["title"] or item.content
        text = scraped["summary"] or ""
        websites.append(f"- {title}: {text[:100]}" + ("..." if len(text) > 100 else ""))

    if websites:
        summary += "\n\nWebsites analyzed:\n" + "\n".join(websites)
    return summary


async def generate_project_summary(
    db: AsyncSession,
    user_id: str,
    project_id: str,
    generator: GenerationClient,
) -> str:
    """Generate, store and return the project's AI summary."""
    project = await get_project(db, user_id, project_id)
    if project is None:
        raise RecordNotFoundError("Project", project_id)

    items = await list_context_items(db, project_id)

    details = []
    for index, item in enumerate(items, start=1):
        details.append(f"{index}. {item.content_type.value}:")
        details.extend(f"   - {line}" for line in item_preview(item))

    prompt = SUMMARY_PROMPT.format(
        name=project.name,
        description=project.description or "N/A",
        lead_source=project.lead_source or "N/A",
        item_count=len(items),
        context_details="\n".join(details),
    )

    trace_section("Project Summary")
    trace_call("services.summary", "GenerationClient.generate")
    try:
        summary = await generator.generate(prompt, model=get_model_for_task("context_summary"))
        trace_result("services.summary", "GenerationClient.generate", True, summary)
    except Exception as e:
        logger.error(f"Summary generation failed for project {project_id}: {e}")
        trace_result("services.summary", "GenerationClient.generate", False, str(e))
        summary = build_fallback_summary(project, items)

    project.context_summary = summary
    await db.commit()
    await db.refresh(project)
    return summary
