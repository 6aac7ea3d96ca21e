"""给模型的提示词"""

import json

from .models import ObjectiveData


def describe_objective(objective: ObjectiveData) -> str:
    return (
        "Your goal is to fill out this medical form with these details: "
        f"{json.dumps(objective.to_dict(), ensure_ascii=False)}."
    )


def build_system_prompt(objective: ObjectiveData, submit_button_name: str = "Submit") -> str:
    return f"""You are an AI agent filling a web form. Your objective is: {describe_objective(objective)}
Your response MUST be a single, valid JSON object and nothing else.

**RULES:**
1. For the "label" in your JSON response, you MUST use the visible text of the form field's label (e.g., "First Name", "Date of Birth"), not the HTML 'name' attribute (e.g., "firstName").
2. For the "name" in a click action, use the visible text of the button or header.
3. First, fill all fields specified in the objective. Do not fill fields that are already correctly filled.
4. For a select field, "value" is the visible text of the option to choose.
5. After all fields are filled, your next action MUST be to click the '{submit_button_name}' button.
6. Only after you have clicked '{submit_button_name}' should you respond with {{"action": "finish"}}.

Available actions:
{{"action": "fill", "label": "...", "value": "..."}}
{{"action": "click", "role": "button", "name": "..."}}
{{"action": "select", "label": "...", "value": "..."}}
{{"action": "finish"}}"""


def build_step_prompt(objective: ObjectiveData, page_state: str) -> str:
    return (
        f"Reminder: {describe_objective(objective)}\n"
        "Based on our history and the current page state, what is the next action? "
        f"Page state:\n```html\n{page_state}\n```"
    )


INVALID_RESPONSE_PROMPT = (
    "Your last response was invalid: it did not contain a valid JSON action object. "
    "Please correct it and reply with a single JSON object only."
)


def build_premature_finish_prompt(submit_button_name: str) -> str:
    return (
        f"You responded with finish, but the '{submit_button_name}' button has not been clicked yet. "
        f"Click '{submit_button_name}' first, then respond with {{\"action\": \"finish\"}}."
    )
