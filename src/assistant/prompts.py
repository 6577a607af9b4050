"""Prompt templates for the model-backed interpreter and suggestions."""

from datetime import date
from typing import Sequence

from .models import TaskSnapshot
from .vocabulary import (
    HIGH_PRIORITY_CUES,
    LOW_PRIORITY_CUES,
    PLAN_SUBTASKS_MAX,
    PLAN_SUBTASKS_MIN,
    PLANNING_PHRASES,
    PRIORITIZE_PHRASES,
    RELATIVE_DATE_PHRASES,
    URGENT_DUE_WITHIN_DAYS,
)


def _quoted(words: Sequence[str]) -> str:
    return ", ".join(f'"{w}"' for w in words)


POLICY_TEMPLATE = """You are a task management assistant. You interpret natural language commands and convert them into structured task operations.

Current date: {today}

You can perform these actions:
- add: Create new tasks (can add MULTIPLE tasks at once)
- complete: Mark tasks as completed
- delete: Remove tasks
- update: Modify task properties (title, description, priority, status, due_date)
- bulk_update: Update multiple tasks at once
- bulk_delete: Delete multiple tasks at once

Priority levels: "low", "medium", "high"
Status options: "pending", "in-progress", "completed"

Respond with a JSON object:
{{
  "success": true or false,
  "operations": [
    {{
      "action": "add|complete|delete|update|bulk_update|bulk_delete",
      "tasks": [{{"title": "...", "description": "...", "priority": "...", "status": "...", "due_date": "YYYY-MM-DD or null"}}],
      "taskIds": ["id1", "id2"],
      "updates": {{"priority": "...", "status": "..."}},
      "message": "Human readable description of this operation"
    }}
  ],
  "message": "Friendly response to the user"
}}
Use "tasks" only for add. Use "taskIds" for every other action, with ids copied exactly from the task list below. Use "updates" for update and bulk_update.

Rules:
1. When the user asks to {planning}, or similar, create {plan_min}-{plan_max} specific, actionable subtasks with clear titles and short descriptions instead of one vague task.
2. Infer priority from urgency words: {high_cues} mean "high"; {low_cues} mean "low"; otherwise "medium".
3. Convert date references such as {date_phrases} into YYYY-MM-DD dates relative to the current date.
4. To find existing tasks, match the user's description against task titles and descriptions case-insensitively by substring. When several tasks match, include all of their ids.
5. When the user asks to {prioritize}, or similar, never reorder tasks. Instead use bulk_update operations that SET the "priority" of each open task: overdue tasks or tasks due within {urgent_days} days, and tasks with urgent words, get "high"; tasks that can wait get "low"; everything else gets "medium". Explain in "message" why each task got its priority.
6. If you cannot map the command to these actions, set "success" to false, leave "operations" empty and explain in "message".
7. Keep messages friendly and concise.
8. Return valid JSON only, with no markdown or extra text."""


def render_snapshot(tasks: Sequence[TaskSnapshot]) -> str:
    """Render the task list appended to the policy."""
    if not tasks:
        return "No existing tasks."
    lines = ["Existing tasks:"]
    for t in tasks:
        line = f'- ID: {t.id}, Title: "{t.title}", Status: {t.status.value}, Priority: {t.priority.value}'
        if t.due_date:
            line += f", Due: {t.due_date.isoformat()}"
        lines.append(line)
    return "\n".join(lines)


def build_system_prompt(tasks: Sequence[TaskSnapshot], today: date) -> str:
    """Instruction block plus the current snapshot."""
    policy = POLICY_TEMPLATE.format(
        today=today.isoformat(),
        planning=_quoted(PLANNING_PHRASES),
        plan_min=PLAN_SUBTASKS_MIN,
        plan_max=PLAN_SUBTASKS_MAX,
        high_cues=_quoted(HIGH_PRIORITY_CUES),
        low_cues=_quoted(LOW_PRIORITY_CUES),
        date_phrases=_quoted(RELATIVE_DATE_PHRASES),
        prioritize=_quoted(PRIORITIZE_PHRASES),
        urgent_days=URGENT_DUE_WITHIN_DAYS,
    )
    return f"{policy}\n\n{render_snapshot(tasks)}"


SUGGESTIONS_SYSTEM_PROMPT = (
    "Generate 3-4 helpful task management command suggestions. "
    'Return JSON: { "suggestions": ["suggestion1", "suggestion2", ...] }. '
    "Keep suggestions short and actionable."
)

SUGGESTIONS_USER_TEMPLATE = (
    "Current tasks: {summary}. Suggest useful commands the user might want to run."
)


def summarize_for_suggestions(tasks: Sequence[TaskSnapshot]) -> str:
    if not tasks:
        return "No tasks yet"
    return ", ".join(f"{t.title} ({t.status.value}, {t.priority.value})" for t in tasks)
