import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

from core.exceptions import ConfigError

# Prompt templates ship inside the core package
PROMPTS_DIR = Path(__file__).parent / "templates"

_PLACEHOLDER = re.compile(r"\{([a-z_]+)\}")


def load_prompt(
    name: str,
    variables: Optional[Dict[str, Any]] = None,
    prompts_dir: Optional[Path] = None,
) -> str:
    """
    Load a prompt template and fill its {var} placeholders.

    Substitution happens in a single pass, so a value that itself contains
    "{something}" is inserted literally. Placeholders without a matching
    variable are left as they are.

    Args:
        name: template name, subdirectories allowed (e.g. "curriculum/suggest")
        variables: placeholder values; None renders as an empty string

    Returns:
        the rendered prompt

    Example:
        load_prompt("curriculum/suggest", {"count": 6, "plo": "PLO1"})
    """
    base = prompts_dir or PROMPTS_DIR
    prompt_path = base / f"{name.replace('/', os.sep)}.md"

    if not prompt_path.exists():
        raise ConfigError(f"prompt template '{name}' not found", config_path=str(prompt_path))

    template = prompt_path.read_text(encoding="utf-8").rstrip("\n")
    if not variables:
        return template

    def _fill(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key not in variables:
            return match.group(0)
        value = variables[key]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_fill, template)
