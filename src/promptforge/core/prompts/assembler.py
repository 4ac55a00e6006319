"""
Prompt assembly: merge a template with user inputs into one prompt string.

Section order is fixed:
  persona → task → context → constraints → negative constraints

Sections are separated by a blank line and the result is stripped.
Each template variable replaces only the FIRST occurrence of its
``[KEY]`` token in the base prompt; later duplicates stay as-is.
"""

from __future__ import annotations

import re

from promptforge.schemas.templates import PromptInputs, Template

_TOKEN = re.compile(r"\[([A-Z0-9_]+)\]")

# (inputs attribute, bullet label) in output order
CONSTRAINT_FIELDS: tuple[tuple[str, str], ...] = (
    ("audience", "Target Audience"),
    ("tone", "Tone"),
    ("style", "Style"),
    ("format", "Output Format"),
    ("length", "Length"),
)

CONSTRAINTS_HEADER = "Please adhere to the following constraints:"
NEGATIVE_HEADER = "IMPORTANT: Do NOT include the following:"


def render_task(inputs: PromptInputs, template: Template) -> str:
    """Substitute variable values (or a visible ``[Label]`` marker) into the base prompt."""
    task = template.base_prompt
    for variable in template.variables:
        value = inputs.value_for(variable.key) or f"[{variable.label}]"
        task = task.replace(f"[{variable.key}]", value, 1)
    return task


def assemble(inputs: PromptInputs, template: Template) -> str:
    sections: list[str] = []

    if inputs.persona:
        sections.append(f"Act as {inputs.persona}.")

    sections.append(f"Your task is to: {render_task(inputs, template)}")

    if inputs.context:
        sections.append(
            f"Use the following context as background information:\n---\n{inputs.context}\n---"
        )

    constraint_lines = [CONSTRAINTS_HEADER]
    for attr, label in CONSTRAINT_FIELDS:
        value = getattr(inputs, attr)
        if value:
            constraint_lines.append(f"- {label}: {value}")
    sections.append("\n".join(constraint_lines))

    if inputs.negative_constraints:
        bullets = [f"- {segment}" for segment in inputs.negative_constraints.split("\n")]
        sections.append("\n".join([NEGATIVE_HEADER, *bullets]))

    return "\n\n".join(sections).strip()


def find_placeholders(base_prompt: str) -> list[str]:
    """Distinct ``[KEY]`` tokens in order of first appearance."""
    seen: list[str] = []
    for match in _TOKEN.finditer(base_prompt):
        key = match.group(1)
        if key not in seen:
            seen.append(key)
    return seen


def unfilled_variables(inputs: PromptInputs, template: Template) -> list[str]:
    """Keys of template variables that would render as an unfilled ``[Label]`` marker."""
    return [v.key for v in template.variables if not inputs.value_for(v.key)]
