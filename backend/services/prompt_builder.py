"""All prompt templates for Gemini API calls."""

from collections.abc import Sequence


def build_feedback_analysis_prompt(
    project_context: str,
    feedback_text: str,
    has_media: bool = False,
) -> str:
    """Quality judgment for a single feedback item.

    Unrelated feedback is scored 1-2 on every dimension before anything else
    is considered.
    """
    return f"""You are an expert product manager analyzing user feedback for a project. Your goal is to evaluate the quality and utility of the feedback based on specific criteria.

<project_context>
{project_context}
</project_context>

<user_feedback>
{feedback_text}
</user_feedback>

<metadata>
Has Media/Attachments: {"true" if has_media else "false"}
</metadata>

<instructions>
FIRST, check whether the feedback is actually related to the project.

Consider:
- Does the feedback discuss the project's features, goals, or implementation?
- Does it address the project's purpose or domain?
- Is it responding to the project's content or asking questions about it?
- Or is it completely unrelated (spam, off-topic discussion, random messages)?

IF THE FEEDBACK IS NOT RELATED TO THE PROJECT:
- Set ALL scores (relevance, depth, evidence, constructiveness, tone) to 1-2
- Relevance MUST be 1 if the feedback is completely unrelated
- Still provide a brief summary

IF THE FEEDBACK IS RELATED TO THE PROJECT, score each criterion from 1 to 10:
1. relevance: How closely does it align with the project's context and goals?
2. depth: Does it provide actionable details, specific examples, or deep insights?
3. evidence: Does it include supporting evidence like screenshots, documents, or references? (Generally higher when media is attached.)
4. constructiveness: Does it offer constructive suggestions or solutions, rather than pure praise or vague criticism?
5. tone: Is the writing clear, concise, and professional?

Also provide a one-sentence summary of the feedback.
</instructions>

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "relevance": <integer 1-10>,
  "depth": <integer 1-10>,
  "evidence": <integer 1-10>,
  "constructiveness": <integer 1-10>,
  "tone": <integer 1-10>,
  "summary": "<one sentence>"
}}"""


def build_feedback_summary_prompt(items: Sequence[tuple[str, bool]]) -> str:
    """Project-level summary of all feedback. ``items`` are (content, has_media)."""
    blocks = []
    for index, (content, has_media) in enumerate(items, start=1):
        media_note = "\n[Includes media/attachments]" if has_media else ""
        blocks.append(f"Feedback {index}:\n{content}{media_note}")
    feedback_section = "\n---\n".join(blocks)

    return f"""<feedback_items>
{feedback_section}
</feedback_items>

<instructions>
Analyze all the feedback items above and create a concise 50-word summary. Focus only on the key points and common themes from the feedback. Do not include any other information.
</instructions>

Return only the summary text. No JSON, no markdown, just the plain text summary (exactly 50 words)."""
