from __future__ import annotations

SYSTEM_PROMPT = """You are a professional proofreader. Review text using British English conventions.
Reply with raw JSON only: no commentary, no markdown."""

LEVEL_INSTRUCTIONS = {
    1: """Focus ONLY on:
- Spelling errors
- Punctuation errors
- Clear grammar mistakes

Do NOT suggest style or clarity improvements.""",
    2: """Focus on:
- Spelling errors (auto-correct)
- Punctuation errors (auto-correct)
- Clear grammar mistakes (auto-correct)
- Top 5-10 most impactful style/clarity issues (as suggestions)

For style/clarity, only flag the most important issues like:
- Very long sentences (>40 words)
- Confusing pronoun references
- Passive voice where active would be much clearer""",
    3: """Provide comprehensive proofreading:
- Spelling errors (auto-correct)
- Punctuation errors (auto-correct)
- Clear grammar mistakes (auto-correct)
- All style suggestions
- All clarity suggestions

Be thorough but preserve the author's voice.""",
}

PROOFREAD_PROMPT_TEMPLATE = """Review the following text.

{level_instructions}

IMPORTANT RULES:
1. Line numbers start at {start_line} for this chunk
2. The "from" field must be the EXACT text to replace (case-sensitive)
3. Preserve the author's voice and technical terminology
4. Don't over-edit - only flag genuine issues
5. SKIP ANY TEXT containing: backslashes, curly braces, superscripts/subscripts, or anything that looks like LaTeX/math notation
6. DO NOT try to "fix" formatting of numbers, units, or mathematical expressions
7. DO NOT change British to American English or vice versa
8. Focus on ACTUAL spelling/grammar errors in plain prose only

Return a JSON array with this structure (no markdown, just raw JSON):
[
  {{"line": <number>, "type": "auto-correction", "kind": "spelling|grammar|punctuation", "from": "<exact text>", "to": "<corrected>", "reason": "<brief reason>"}},
  {{"line": <number>, "type": "suggestion", "kind": "style|clarity", "from": "<original text>", "to": "<suggested replacement>", "reason": "<brief reason>"}}
]

If text has no issues, return: []

TEXT TO PROOFREAD:
```
{text}
```"""


def build_prompt(text: str, level: int, start_line: int) -> str:
    return PROOFREAD_PROMPT_TEMPLATE.format(
        level_instructions=LEVEL_INSTRUCTIONS[level],
        start_line=start_line,
        text=text,
    )
