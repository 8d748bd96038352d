"""
Prompt builder for concept graph extraction, summaries and explanations.

Templates can be overridden from a YAML file; missing keys keep the
built-in defaults.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

import yaml

from conceptgraph.core.personas import Persona
from conceptgraph.extraction.exceptions import PromptTemplateError

logger = logging.getLogger(__name__)

MIN_BRANCHES = 3
MAX_BRANCHES = 12

GRAPH_EXTRACTION_TEMPLATE = """You are creating a hierarchical mindmap from text. Your goal is to identify ONE central concept and organize related ideas in a clear tree structure.

{persona_instructions}

CRITICAL RULES:
1. Create EXACTLY ONE "main" concept (the central topic)
2. Create {min_branches}-{max_branches} "secondary" concepts (major branches from the main topic)
3. Create "tertiary" concepts only under secondary branches that have genuine sub-points
4. Use at most {max_nodes} concepts in total
5. NEVER repeat the same concept twice - each concept must be unique
6. Keep labels concise (2-5 words maximum)
7. Connections form a PARENT-TO-CHILD tree: each concept lists only its CHILDREN, never its parent
8. Every id listed in "connections" MUST have its own concept object in the array

STRUCTURE & CONNECTIONS:
- Main concept (type: "main") lists its secondary children
- Secondary concepts (type: "secondary") list their tertiary children (NOT main)
- Tertiary concepts (type: "tertiary") have an empty connections array

OUTPUT FORMAT - Return ONLY a valid JSON array, no markdown, no explanation:
[
  {{"id": "main", "label": "Built-in AI Capabilities", "type": "main", "connections": ["benefits", "performance"]}},
  {{"id": "benefits", "label": "Benefits of Built-in AI", "type": "secondary", "connections": ["privacy", "offline-access"]}},
  {{"id": "privacy", "label": "Privacy Protection", "type": "tertiary", "connections": []}},
  {{"id": "offline-access", "label": "Offline Functionality", "type": "tertiary", "connections": []}},
  {{"id": "performance", "label": "Hardware Acceleration", "type": "secondary", "connections": []}}
]

TEXT TO ANALYZE:
{text}

Remember: Return ONLY the JSON array. Connections are PARENT -> CHILD only. No markdown code blocks, no extra text."""

CHUNK_SUMMARY_TEMPLATE = """Summarize part {part} of {total} of a longer text in a few short paragraphs.
Keep the main concepts, names, facts and relationships. Do not add commentary.

TEXT:
{text}"""

EXPLANATION_TEMPLATE = """Explain the concept "{label}" in a clear, concise way.

Use the following context to make your explanation relevant and specific:

{context}

INSTRUCTIONS:
- Keep explanation to 2-3 sentences ({max_length} chars max)
- Be clear and accessible
- Focus on why this concept matters
- Connect it to the broader context if possible
- Avoid jargon unless necessary

Explain "{label}":"""


SUMMARY_TEMPLATE = """Summarize the following text as {summary_type}.
Aim for a {length} summary of at most {max_chars} characters, in plain text without markdown.
Keep the main concepts, names, facts and relationships.

TEXT:
{text}"""

# Sample values used to check that a template override renders
TEMPLATE_FIELDS = {
    "graph_extraction": {
        "persona_instructions": "",
        "min_branches": 3,
        "max_branches": 5,
        "max_nodes": 12,
        "text": "",
    },
    "chunk_summary": {"part": 1, "total": 1, "text": ""},
    "explanation": {"label": "", "context": "", "max_length": 300},
    "summary": {"summary_type": "key points", "length": "medium", "max_chars": 1000, "text": ""},
}


def branch_range(max_nodes: int) -> tuple[int, int]:
    """Branch count range to request for a node budget."""
    upper = max(MIN_BRANCHES, min(MAX_BRANCHES, (max_nodes - 1) // 2))
    return MIN_BRANCHES, upper


class ConceptPromptBuilder:
    """Builds prompts sent to the text-generation service."""

    def __init__(self, prompts_path: str | None = None):
        """Initialize with optional YAML template overrides."""
        self.templates = {
            "graph_extraction": GRAPH_EXTRACTION_TEMPLATE,
            "chunk_summary": CHUNK_SUMMARY_TEMPLATE,
            "explanation": EXPLANATION_TEMPLATE,
            "summary": SUMMARY_TEMPLATE,
        }
        if prompts_path:
            self.templates.update(self._load_templates(Path(prompts_path)))

    def _load_templates(self, path: Path) -> dict[str, str]:
        """
        Load template overrides from YAML file.

        Overrides that are not strings or do not render with their fields
        (e.g. unescaped JSON braces) are skipped with a warning.
        """
        if not path.exists():
            logger.warning(f"Prompts file not found: {path}, using defaults")
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            logger.error(f"Error loading prompts: {e}, using defaults")
            return {}

        if not isinstance(data, Mapping):
            logger.warning(f"Prompts file {path} must map template names to strings, using defaults")
            return {}

        overrides = {}
        for name, template in data.items():
            if name not in TEMPLATE_FIELDS:
                logger.warning(f"Ignoring unknown prompt template '{name}'")
                continue
            if not isinstance(template, str):
                logger.warning(f"Ignoring prompt template '{name}': expected a string")
                continue
            try:
                template.format(**TEMPLATE_FIELDS[name])
            except (KeyError, IndexError, AttributeError, ValueError) as e:
                logger.warning(
                    f"Ignoring prompt template '{name}': does not render ({type(e).__name__}: {e}); "
                    f"literal braces must be doubled"
                )
                continue
            overrides[name] = template

        logger.info(f"Loaded prompt overrides from {path}: {', '.join(overrides) or 'none'}")
        return overrides

    def _render(self, name: str, **fields) -> str:
        try:
            return self.templates[name].format(**fields)
        except (KeyError, IndexError, AttributeError, ValueError) as e:
            raise PromptTemplateError(f"Prompt template '{name}' failed to render: {type(e).__name__}: {e}") from e

    def build_graph_prompt(self, text: str, persona: Persona, max_nodes: int) -> str:
        """Prompt asking for a root/branch/leaf concept array."""
        low, high = branch_range(max_nodes)
        body = self._render(
            "graph_extraction",
            persona_instructions=persona.mindmap_instructions,
            min_branches=low,
            max_branches=high,
            max_nodes=max_nodes,
            text=text,
        )
        return f"{persona.prompt_style}\n\n{body}"

    def build_chunk_summary_prompt(self, chunk: str, index: int, total: int) -> str:
        """Prompt summarizing one chunk of an oversized text."""
        return self._render("chunk_summary", part=index + 1, total=total, text=chunk)

    def build_explanation_prompt(self, label: str, context: str, persona: Persona, max_length: int) -> str:
        """Prompt explaining a single concept against a context window."""
        body = self._render("explanation", label=label, context=context, max_length=max_length)
        return f"{persona.prompt_style}\n\n{body}"

    def build_summary_prompt(self, text: str, persona: Persona, summary_type: str, length: str, max_chars: int) -> str:
        """Prompt summarizing a whole (already compressed) text."""
        body = self._render(
            "summary",
            summary_type=summary_type,
            length=length,
            max_chars=max_chars,
            text=text,
        )
        return f"{persona.prompt_style}\n\n{body}"
