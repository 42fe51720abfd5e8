"""Email templates bundled with the Lambda package."""

import html
import re
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from utils.exceptions import RenderError
from utils.logger import get_logger

logger = get_logger("templates")

TEMPLATES_DIR = Path(__file__).parent / "email_templates"

VERIFICATION_TEMPLATE = "user_verification.html"
INVITE_TEMPLATE = "user_invite.html"

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


def load_template(name: str, templates_dir: Optional[Union[str, Path]] = None) -> str:
    """Load a template file by name, e.g. "user_invite.html".

    Raises:
        RenderError: If the name escapes the template directory or the file
            cannot be read.
    """
    if Path(name).name != name:
        raise RenderError(name, "template name must be a bare file name")

    base = Path(templates_dir) if templates_dir else TEMPLATES_DIR
    path = base / name

    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise RenderError(name, f"cannot read {path}: {e.strerror or e}") from e


def render_template(
    name: str,
    context: Mapping[str, Any],
    templates_dir: Optional[Union[str, Path]] = None,
) -> str:
    """Load a template and replace its `{{ key }}` placeholders with escaped values.

    Every placeholder must have a value in `context`; extra keys are ignored.
    """
    template = load_template(name, templates_dir)

    missing = sorted(
        {key for key in _PLACEHOLDER.findall(template) if context.get(key) is None}
    )
    if missing:
        raise RenderError(name, f"no value for {', '.join(missing)}")

    rendered = _PLACEHOLDER.sub(
        lambda m: html.escape(str(context[m.group(1)])), template
    )
    logger.debug("templates.rendered", extra={"template": name})
    return rendered
