"""
Response template engine using Jinja2.

Agent templates are authored with single-brace placeholders
so they read like plain sentences::

    "Looking at {topic}, {insight}"

Before rendering, ``{name}`` placeholders are rewritten to
Jinja2 expressions (``{{ name }}``) and the result is rendered
in a sandboxed environment.  Placeholders with no value in the
supplied params render as empty strings.
"""

import re
from typing import Dict, Any, List
from jinja2.sandbox import SandboxedEnvironment


# Sandboxed Jinja2 environment: no file access, no imports,
# no attribute/item access on objects.
_jinja_env = SandboxedEnvironment(
    autoescape=False,
    keep_trailing_newline=False,
)

# A lone ``{name}`` that is not already part of ``{{ }}``
# or ``{% %}``.
_PLACEHOLDER_RE = re.compile(
    r"(?<!\{)\{([a-zA-Z_][a-zA-Z0-9_]*)\}(?!\})"
)


def _normalize_template(template_str: str) -> str:
    """
    Convert single-brace placeholders to Jinja2 expressions.

    ``{topic}`` → ``{{ topic }}``.  Existing Jinja2 syntax is
    left untouched.

    Parameters:
        template_str (str): Raw response template.

    Returns:
        str: Template with Jinja2 delimiters.
    """
    return _PLACEHOLDER_RE.sub(r"{{ \1 }}", template_str)


def render_template(
    template_str: str,
    params: Dict[str, Any],
) -> str:
    """
    Render a response template with the given params.

    Values are converted to strings before rendering so that
    user-derived text (topics) is never evaluated as a Jinja2
    expression.

    Parameters:
        template_str (str): Template with ``{name}`` placeholders.
        params (dict): Placeholder values.

    Returns:
        str: Rendered text with collapsed whitespace.
    """
    template_str = _normalize_template(template_str)
    context = {k: str(v) for k, v in params.items()}

    template = _jinja_env.from_string(template_str)
    rendered = template.render(**context)

    # Collapse double spaces left by empty placeholders.
    return re.sub(r"[ \t]{2,}", " ", rendered).strip()


def extract_placeholders(template_str: str) -> List[str]:
    """
    List the placeholder names used by a template.

    Parameters:
        template_str (str): Template with ``{name}`` placeholders.

    Returns:
        list[str]: Unique names in first-appearance order.
    """
    names: List[str] = []
    for name in _PLACEHOLDER_RE.findall(template_str):
        if name not in names:
            names.append(name)
    return names
