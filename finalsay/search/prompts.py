# Prompts used while resolving sources for advice replies.

from finalsay.generate.types import Prompt

QUERY_EXTRACTION_SYSTEM = """\
You turn a situation into web search queries for trustworthy reference material.
Return 3-6 short search queries separated by the pipe character |.
No numbering, no quotes, no commentary.
"""

SOURCE_SUGGESTION_SYSTEM = """\
You suggest reputable reference pages (health, science, government, or major
academic and institutional sites) relevant to a situation.
Return 4-8 lines, each exactly in the form:
Title — URL — Query
Use real, well-known pages only. No commentary.
"""


def query_extraction_prompt(context: str) -> Prompt:
    return Prompt(system=QUERY_EXTRACTION_SYSTEM, user=context, temperature=0.2, max_tokens=120)


def source_suggestion_prompt(context: str) -> Prompt:
    return Prompt(system=SOURCE_SUGGESTION_SYSTEM, user=context, temperature=0.3, max_tokens=500)
