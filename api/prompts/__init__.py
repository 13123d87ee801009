"""Prompt templates for AI enrichment."""

from pathlib import Path


def load_prompt(filename: str) -> str:
    """Load a prompt template from the prompts directory.

    Args:
        filename: Name of the prompt file (e.g., 'analyze_prompt.txt')

    Returns:
        Prompt template as string
    """
    prompt_path = Path(__file__).parent / filename
    return prompt_path.read_text(encoding="utf-8").strip()


def get_analyze_prompt(content: str, title: str) -> str:
    """Prompt asking for a JSON analysis of a note."""
    return load_prompt("analyze_prompt.txt").format(title=title, content=content)


def get_suggestions_prompt(content: str) -> str:
    """Prompt asking for completion suggestions."""
    return load_prompt("suggestions_prompt.txt").format(content=content)


def get_improve_prompt(content: str) -> str:
    """Prompt asking for a grammar and style rewrite."""
    return load_prompt("improve_prompt.txt").format(content=content)


def get_related_prompt(content: str, candidates: str) -> str:
    """Prompt asking which existing notes relate to the content.

    Args:
        content: Content being edited
        candidates: One formatted line per existing note
    """
    return load_prompt("related_prompt.txt").format(content=content, candidates=candidates)
