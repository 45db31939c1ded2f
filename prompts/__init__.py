"""Instruction texts sent to the extraction model, stored as ``<name>.txt`` files."""
from pathlib import Path
import typing as t


PROMPTS_DIR = Path(__file__).resolve().parent


def available_prompts(prompts_dir: t.Optional[Path] = None) -> list[str]:
    """Names of all prompt files in ``prompts_dir`` (without the .txt extension)."""
    return sorted(p.stem for p in Path(prompts_dir or PROMPTS_DIR).glob("*.txt"))


def load_prompt(prompt_name: str, prompts_dir: t.Optional[Path] = None) -> str:
    """
    Load a prompt from its text file.

    Args:
        prompt_name: Name of the prompt file (without .txt extension)
        prompts_dir: Directory to look in; defaults to this package's directory.

    Returns:
        The prompt text with surrounding whitespace removed.

    Raises:
        FileNotFoundError: If the prompt file doesn't exist.
    """
    prompt_file = Path(prompts_dir or PROMPTS_DIR) / f"{prompt_name}.txt"
    if not prompt_file.is_file():
        raise FileNotFoundError(
            f"Prompt file not found: {prompt_file} (available: {', '.join(available_prompts(prompts_dir)) or 'none'})"
        )
    return prompt_file.read_text(encoding="utf-8").strip()
