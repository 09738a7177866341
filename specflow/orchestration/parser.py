# specflow/orchestration/parser.py
"""
Document marker parser.

Parses executor LLM output using deterministic markers:

<<<FILE path="project-brief.md">>>
document content
<<<END_FILE>>>

STRICT PROTOCOL:
- Only text between markers is kept; reasoning outside them is ignored
- A block without <<<END_FILE>>> is reported as incomplete (truncated output)
- No markdown fallback when markers are absent
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List

from specflow.core.logging import log


# Primary format: <<<FILE path="PRD.md">>>
FILE_START_PATTERN = re.compile(
    r'<<<FILE\s+path=["\']([^"\']+)["\'](?:\s+[^>]*)?\s*>>>',
    re.IGNORECASE
)
FILE_END_PATTERN = re.compile(r'<<<END_FILE>>>', re.IGNORECASE)

# Colon format: <<<FILE: PRD.md>>>
LEGACY_FILE_START = re.compile(r'<<<FILE:\s*([^>]+)>>>', re.IGNORECASE)

CODE_FENCE = re.compile(r'^```[a-zA-Z0-9_-]*\n(.*?)\n?```$', re.DOTALL)


@dataclass
class ParsedDocuments:
    documents: Dict[str, str] = field(default_factory=dict)
    incomplete: List[str] = field(default_factory=list)
    markers_found: bool = True

    @property
    def complete(self) -> bool:
        return self.markers_found and not self.incomplete


def _strip_code_fence(content: str) -> str:
    """Remove a single wrapping ``` fence if the model added one."""
    match = CODE_FENCE.match(content.strip())
    return match.group(1).strip() if match else content


def _normalize_name(path: str) -> str:
    # Documents are flat per phase; drop any directory the model invented
    return path.strip().replace("\\", "/").rsplit("/", 1)[-1]


def parse_documents(raw_output: str, source: str = "") -> ParsedDocuments:
    """
    Parse marker-delimited LLM output into {document name: content}.

    Later blocks with the same name replace earlier ones.
    """
    if not raw_output or not isinstance(raw_output, str):
        return ParsedDocuments(markers_found=False)

    starts = list(FILE_START_PATTERN.finditer(raw_output))
    if not starts:
        starts = list(LEGACY_FILE_START.finditer(raw_output))

    if not starts:
        log("PARSER", f"No document markers in {source} output: {raw_output[:200]!r}")
        return ParsedDocuments(markers_found=False)

    result = ParsedDocuments()
    for i, match in enumerate(starts):
        name = _normalize_name(match.group(1))
        content_start = match.end()
        next_start = starts[i + 1].start() if i + 1 < len(starts) else len(raw_output)

        region = raw_output[content_start:next_start]
        end_match = FILE_END_PATTERN.search(region)

        if end_match:
            result.documents[name] = _strip_code_fence(region[:end_match.start()].strip())
            if name in result.incomplete:
                result.incomplete.remove(name)
        else:
            content = region.strip()
            if content:
                result.documents[name] = _strip_code_fence(content)
                result.incomplete.append(name)

    log("PARSER", f"Parsed {len(result.documents)} documents from {source}", data={
        "documents": sorted(result.documents),
        "incomplete": result.incomplete,
    })
    return result
