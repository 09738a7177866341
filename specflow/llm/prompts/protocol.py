# specflow/llm/prompts/protocol.py
"""
Output protocol shared by every executor prompt.
"""

DOCUMENT_PROTOCOL = """
OUTPUT FORMAT (STRICT):
Emit every requested document between markers, one block per document:

<<<FILE path="document-name.md">>>
<complete document content>
<<<END_FILE>>>

RULES:
- Use exactly the document names you were asked for.
- Every block MUST end with <<<END_FILE>>>.
- Anything outside the markers is ignored.
- JSON documents contain valid JSON only, no code fences.
"""
