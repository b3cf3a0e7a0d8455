"""
Prompt templates for the structuring collaborator.
"""

# Suggestion tags inserted in step 1 and consumed in step 2
TAG_KEY_POINT = "[Suggest:Key Point]"
TAG_WARNING = "[Suggest:Warning]"
TAG_CASE_STUDY = "[Suggest:Case Study]"
TAG_DEFINITION = "[Suggest:Definition]"
TAG_IMAGE = "[Suggest:Insert Image]"
TAG_STEPS_OPEN = "[Steps]"
TAG_STEPS_CLOSE = "[/Steps]"

SUGGESTION_PROMPT = """
You are a professional instructional designer with strict editorial standards. Analyze the user's raw Markdown text and insert structural suggestion tags where they improve readability.

Core rules:
1. **Keep every piece of the original text.** Do not delete or rewrite anything.
2. **Be strict about key points.**
   - If every sentence is a key point, nothing is.
   - Only core conclusions, golden rules, warnings whose neglect leads to failure, or counter-intuitive insights deserve `{key_point}`.
   - Background, process narration, term explanations and ordinary advice are **not** key points.
   - Key points must not exceed 10% of the document.
3. **Never generate a table of contents.** It is generated automatically from the headings.
4. **Tag formats:**
   - `{key_point} text to emphasize` (use very sparingly)
   - `{warning} text to warn about` (operational risks)
   - `{case_study} case content`
   - `{definition} Term: explanation`
   - `{image}` (on its own line, after long passages or at concept transitions)
5. Output **only** the enhanced Markdown, with no explanation, preamble or closing remarks.

The user's raw content:
---
{content}
---
"""

STRUCTURING_PROMPT = """
You are a professional courseware formatting assistant. Convert the Markdown content below into a JSON array of content blocks, following these rules strictly.

**Tasks:**
1. **NO table of contents.** Never emit objects of type 'toc'. Do not turn an existing contents list into paragraphs either; skip it. The table of contents is generated from the headings.
2. Convert the remaining content into block objects.

**Tag cleaning (CRITICAL):** the text may contain suggestion tags. Remove the tag and keep the content:
- `{key_point} text` -> type 'key_point', content 'text'
- `{warning} text` -> type 'warning_box', content 'text'
- `{case_study} text` -> type 'case_study', content 'text'
- `{definition} Term: explanation` -> type 'definition', term 'Term', definition 'explanation'
- `{image}` -> type 'image_suggestion' with a unique id and precedingText
- `[Image imported: ID]` -> type 'image_suggestion', id 'ID'

**Tables:**
- Cell values are single-line strings. Replace real newlines with spaces or an escaped `\\n`.
- Remove any suggestion tags inside cells.
- Escape double quotes as `\\"`.

**Structure:**
- '# text' -> 'chapter_title'
- '## text' -> 'section_title'
- '### text' -> 'subsection_title'
- '{steps_open} ... {steps_close}' -> 'steps_list' with a 'steps' array
- 'Label: ________' -> 'form_field' with 'label'
- '□ option' lines -> 'checkbox_group' with 'label' and 'options'
- Markdown tables -> 'table' with 'headers' and 'rows'
- everything else -> 'paragraph'

**Formatting:** convert Markdown bold (`**text**`) to `<strong>text</strong>`. Every JSON string value must be correctly escaped.

Block fields: type (required), content, id, precedingText, term, definition, label, options, steps, headers, rows.

Analyze this content:
---
{content}
---
"""

_TAGS = {
    "key_point": TAG_KEY_POINT,
    "warning": TAG_WARNING,
    "case_study": TAG_CASE_STUDY,
    "definition": TAG_DEFINITION,
    "image": TAG_IMAGE,
    "steps_open": TAG_STEPS_OPEN,
    "steps_close": TAG_STEPS_CLOSE,
}


def build_suggestion_prompt(content: str) -> str:
    return _fill(SUGGESTION_PROMPT, content)


def build_structuring_prompt(content: str) -> str:
    return _fill(STRUCTURING_PROMPT, content)


def _fill(template: str, content: str) -> str:
    # str.replace, not format(): user content may contain braces
    text = template
    for name, tag in _TAGS.items():
        text = text.replace("{" + name + "}", tag)
    return text.replace("{content}", content).strip()
