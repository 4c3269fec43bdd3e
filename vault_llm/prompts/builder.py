"""Prompt templates for querying the vault and creating notes.

The citation syntax ``[[path]]`` / ``[[path#section]]`` requested here is the
same one :mod:`vault_llm.citations.normalizer` parses back out of responses.
"""

from vault_llm.config.assistant import Mode

TITLE_EXCERPT_CHARS = 500

# System instructions sent alongside the prompt
CHAT_SYSTEM_PROMPT = (
    "You are an expert assistant. Answer responsibly, concisely, and precisely. "
    "Always cite sources using [[Filename]]."
)
COMPLETION_SYSTEM_PROMPT = "You are an expert assistant. Answer concisely."
LOCAL_SYSTEM_PROMPT = "You are a helpful assistant that answers questions about the user's Obsidian vault content."

_NO_FENCE_RULE = (
    "IMPORTANT: Respond ONLY with the note content directly, without any additional text, "
    "introductions, or wrapper. DO NOT include ```md at the beginning or ``` at the end.\n"
    "Use proper Markdown formatting with headings, lists, and code blocks as needed."
)

QUERY_WITH_CONTEXT_TEMPLATE = """You are an expert assistant for the user's Obsidian vault.
1. Be concise and precise. Minimize filler text and get straight to the answer.
2. Answer STRICTLY based on the provided notes.
3. Cite sources using the format [[file_path]].
4. Use Markdown formatting.
5. When you reference a specific section of a note, use the format [[file_path#section_title]] and keep the section title exactly as written in the note, with the same capitalization.

User's Notes:
{context}

{current_file}

User's Question: {query}"""

QUERY_TEMPLATE = """You are an expert assistant.
1. Answer clearly and concisely. Minimize filler text.
2. Use Markdown formatting.

User's Question: {query}"""

CREATE_WITH_CONTEXT_TEMPLATE = (
    """You are a helpful assistant for creating new notes in the user's Obsidian vault.
You have access to the user's existing notes which are provided below.
Please create a comprehensive note about the requested topic, incorporating relevant information from the existing notes when applicable.
When referencing content from existing notes, cite the source file using the format [[file_path]].

"""
    + _NO_FENCE_RULE
    + """
If you quote or reference content from the vault, make sure to include proper citations, you may include the specific part of the file that you are referencing using the format [[file_path#title_of_the_section_you_are_referencing]] (Do not change the title of the section you are referencing, use the same title as it is in the file with the same capitalization).
For any code examples, use proper markdown code blocks with language specification.

User's Notes:
{context}

{current_file}

Topic to create a note about: {query}"""
)

CREATE_TEMPLATE = (
    """You are a helpful assistant for creating new notes.
Please create a comprehensive note about the requested topic.

"""
    + _NO_FENCE_RULE
    + """
For any code examples, use proper markdown code blocks with language specification.

Topic to create a note about: {query}"""
)

TITLE_TEMPLATE = """Based on the following question and answer, suggest a concise, descriptive title (5-7 words max) that summarizes the main topic. Return ONLY the title text, nothing else.

Question: {query}

Answer: {excerpt}... (truncated for brevity)"""

_TEMPLATES = {
    (Mode.QUERY, True): QUERY_WITH_CONTEXT_TEMPLATE,
    (Mode.QUERY, False): QUERY_TEMPLATE,
    (Mode.CREATE, True): CREATE_WITH_CONTEXT_TEMPLATE,
    (Mode.CREATE, False): CREATE_TEMPLATE,
}


def build_prompt(
    mode: Mode | str,
    use_context: bool,
    query: str,
    context: str = "",
    current_path: str | None = None,
) -> str:
    """
    Build the instruction text sent to a backend.

    Args:
        mode: query or create
        use_context: Whether vault notes are part of the prompt
        query: User's question or note topic
        context: Context blob from the assembler
        current_path: Path of the document the user is looking at

    Returns:
        Prompt text
    """
    template = _TEMPLATES[(Mode(mode), bool(use_context))]
    current_file = f"Current file: {current_path}" if current_path else ""
    return template.format(context=context, current_file=current_file, query=query)


def build_title_prompt(query: str, response: str) -> str:
    """Prompt asking for a short title summarizing a question and its answer."""
    return TITLE_TEMPLATE.format(query=query, excerpt=response[:TITLE_EXCERPT_CHARS])
