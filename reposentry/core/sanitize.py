"""Prompt shaping and output cleaning for the generation backend.

The backend is an agentic CLI that tends to narrate what it is doing. Prompts
are prefixed with strict output instructions, and responses are stripped of
narration while markdown structure is kept verbatim.
"""

import re
from re import Pattern

DEFAULT_MAX_PROMPT_LENGTH = 6000
TRUNCATION_MARKER = " ... (truncated)"

_NO_WRITES = "You may read project files for context but do NOT create or write any files."

DIAGRAM_PREFIX = (
    "IMPORTANT: Output ONLY the raw Mermaid diagram code. "
    "No markdown fences, no explanatory text, no narration, no commentary. "
    'Do NOT ask clarifying questions. Do NOT say "I will" or "Let me". '
    "Start directly with the diagram type keyword (flowchart, sequenceDiagram, erDiagram, etc). "
    f"{_NO_WRITES}\n\n"
)

JSON_PREFIX = (
    "IMPORTANT: Output ONLY valid JSON. "
    "No markdown fences, no explanatory text, no narration, no commentary. "
    "Do NOT ask clarifying questions. "
    f"{_NO_WRITES}\n\n"
)

MARKDOWN_PREFIX = (
    "IMPORTANT: Output ONLY the requested content in Markdown format. "
    "Do NOT include any explanatory text, narration, commentary, or phrases like "
    '"Let me", "I will", "Here is", "Based on". Start directly with the Markdown content. '
    "Do NOT ask clarifying questions, just generate the content. "
    f"{_NO_WRITES}\n\n"
)

_TOOL_BLOCK = re.compile(r"```(?:tool_call|tool_result)[\s\S]*?```")
_EXCESS_BLANKS = re.compile(r"\n{3,}")
_NUMBERED_ITEM = re.compile(r"^\d+\.\s")

# Whole-line narration the backend emits around the real content
NARRATION_PATTERNS: list[Pattern[str]] = [
    re.compile(
        r"^(?:Let me|I'll|I will|I need to|I'm going to|I should|Now I'll|Now I |Now let|Let's|OK,? "
        r"|Perfect[!.,]|Great[!.,]|Sure[!.,]|Done[!.,]|Alright[!.,]).*",
        re.I,
    ),
    re.compile(
        r"^(?:I've (?:created|generated|written|updated|analyzed|completed|finished|prepared|built|compiled)).*",
        re.I,
    ),
    re.compile(r"^(?:Here(?:'s| is| are) (?:the|your|a|an)).*", re.I),
    re.compile(r"^(?:Based on (?:the|your|this|my)).*", re.I),
    re.compile(r"^(?:It (?:seems|looks|appears) (?:like |that )?(?:the|this|your)).*", re.I),
    re.compile(r"^(?:Since (?:the|this|we|you|I)).*", re.I),
    re.compile(
        r"^(?:This (?:is|will|should|would|could|appears|seems|looks|indicates|shows|means)).*",
        re.I,
    ),
    re.compile(
        r"^(?:The (?:analysis|report|output|result|file|content|project|code) "
        r"(?:shows|indicates|suggests|reveals)).*",
        re.I,
    ),
    re.compile(r"^(?:To (?:create|generate|build|analyze|provide|help|summarize|address)).*", re.I),
    re.compile(
        r"^(?:(?:Looking|Checking|Analyzing|Reading|Scanning|Examining|Reviewing|Processing) "
        r"(?:at |the |this |your |through )).*",
        re.I,
    ),
]

_STRUCTURAL_PREFIXES = ("#", "|", "- ", "* ", "> ", "```", "![", "[")


def detect_format(prompt: str) -> str:
    """Guess the output format a prompt asks for.

    Returns:
        "mermaid", "json" or "markdown"
    """
    if re.search(r"mermaid", prompt, re.I) and re.search(r"diagram", prompt, re.I):
        return "mermaid"
    if re.search(r"valid JSON", prompt, re.I):
        return "json"
    return "markdown"


def prepare_prompt(prompt: str, max_length: int = DEFAULT_MAX_PROMPT_LENGTH) -> str:
    """Prefix format instructions, collapse whitespace and bound the length.

    Args:
        prompt: Raw prompt text
        max_length: Maximum length before the truncation marker is added

    Returns:
        A single-line prompt safe to pass as a command-line argument
    """
    prefixes = {
        "mermaid": DIAGRAM_PREFIX,
        "json": JSON_PREFIX,
        "markdown": MARKDOWN_PREFIX,
    }
    prefix = prefixes[detect_format(prompt)]

    clean = re.sub(r"\s+", " ", prefix + prompt).strip()
    if len(clean) > max_length:
        clean = clean[:max_length] + TRUNCATION_MARKER
    return clean


def is_structural(line: str) -> bool:
    """Check whether a stripped line is markdown structure that must be kept."""
    return line.startswith(_STRUCTURAL_PREFIXES) or bool(_NUMBERED_ITEM.match(line))


def is_narration(line: str) -> bool:
    """Check whether a stripped line is backend narration."""
    return any(pattern.match(line) for pattern in NARRATION_PATTERNS)


def clean_output(raw: str) -> str:
    """Strip narration from backend output, keeping only the content.

    Args:
        raw: Standard output of the backend process

    Returns:
        Cleaned text, trimmed, with runs of blank lines collapsed
    """
    text = _TOOL_BLOCK.sub("", raw)

    kept: list[str] = []
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped or is_structural(stripped):
            kept.append(line)
            continue
        if is_narration(stripped):
            continue
        kept.append(line)

    return _EXCESS_BLANKS.sub("\n\n", "\n".join(kept)).strip()
