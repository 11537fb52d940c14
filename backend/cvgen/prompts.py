"""
Prompt composition for CV generation.

Text requests produce a single prompt string, either by filling a caller
supplied template or by the default layout:

    <system prompt>
    <rendered history>
    User: <input>
    Response:

Requests with an image produce a three part payload
[system prompt, image part, text] where the text part still honours the
template when one is given.
"""
import json
import re
from typing import Any, Dict, List, Optional, Union

PLACEHOLDER_RE = re.compile(r"\{(context|system_prompt|prompt)\}")
RESPONSE_CUE = "Response:"
# Only used when a custom template renders the image text part to an empty string.
DEFAULT_IMAGE_PROMPT = "Describe this image and how it could be used in a CV."

PromptValue = Union[str, List[Any]]


def serialize_cv_data(cv_data: Any) -> str:
    if isinstance(cv_data, str):
        return cv_data
    return json.dumps(cv_data, indent=2, ensure_ascii=False)


def build_user_input(prompt: Optional[str], cv_data: Any = None) -> str:
    """Raw prompt, or the serialized CV data followed by the optional prompt.

    Blank prompts and empty-string CV data count as absent.
    """
    prompt = (prompt or "").strip()
    if cv_data is None or cv_data == "":
        return prompt
    text = "CV data:\n" + serialize_cv_data(cv_data)
    if prompt:
        text += "\n\n" + prompt
    return text


def fill_template(template: str, context: str, system_prompt: str, prompt: str) -> str:
    """Literal single-pass substitution; unknown placeholders are left untouched."""
    values = {"context": context, "system_prompt": system_prompt, "prompt": prompt}
    return PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], template)


class PromptComposer:
    def __init__(self, response_cue: str = RESPONSE_CUE, image_prompt: str = DEFAULT_IMAGE_PROMPT):
        self.response_cue = response_cue
        self.image_prompt = image_prompt

    def compose(
        self,
        request,
        context: str,
        system_prompt: str,
        image_part: Optional[Dict[str, str]] = None,
    ) -> PromptValue:
        user_input = build_user_input(request.prompt, request.cvData)
        template = request.customPromptTemplate

        if image_part is not None:
            text = fill_template(template, context, system_prompt, user_input) if template else user_input
            return [system_prompt, image_part, text or self.image_prompt]

        if template:
            return fill_template(template, context, system_prompt, user_input)
        return f"{system_prompt}\n{context}\nUser: {user_input}\n{self.response_cue}"


def build_format_prompt(cv_data: Any, style: str = "professional") -> str:
    return (
        f"Review the following CV data and suggest how to format it in a {style} style.\n"
        "Cover section order, headings, bullet structure, length and visual consistency. "
        "Do not invent new content.\n\n"
        f"CV data:\n{serialize_cv_data(cv_data)}"
    )


def build_improve_prompt(
    cv_section: str,
    current_content: str,
    job_title: Optional[str] = None,
    industry: Optional[str] = None,
) -> str:
    target = ""
    if job_title:
        target += f"Target job title: {job_title}\n"
    if industry:
        target += f"Industry: {industry}\n"
    return (
        f"Improve the \"{cv_section}\" section of a CV.\n"
        f"{target}"
        "Keep every fact truthful, use strong action verbs, quantify impact where the "
        "content allows it and keep the wording ATS-friendly.\n"
        "Return the improved section followed by a short list of the changes made.\n\n"
        f"Current content:\n{current_content}"
    )


PROMPT_GUIDE: Dict[str, Any] = {
    "endpoints": {
        "generate": {
            "path": "/api/generate",
            "fields": {
                "prompt": "Instruction for the model, e.g. 'Write a professional summary'",
                "cvData": "Structured CV data (object); either prompt or cvData is required",
                "threadID": "Conversation id; omit to start a new conversation",
                "imageUrl": "Optional image to include in the request",
                "customPromptTemplate": "Template using {system_prompt}, {context} and {prompt}",
                "temperature": "0.0 - 2.0, default 0.7",
                "maxTokens": "Output token ceiling, default 1500",
                "systemPrompt": "Overrides the default system instructions",
                "clearHistory": "Reset the conversation before this request",
            },
        },
        "formatCv": {"path": "/api/format-cv", "fields": {"cvData": "required", "style": "default 'professional'"}},
        "improveCv": {
            "path": "/api/improve-cv",
            "fields": {"cvSection": "required", "currentContent": "required", "jobTitle": "optional", "industry": "optional"},
        },
    },
    "templatePlaceholders": ["{system_prompt}", "{context}", "{prompt}"],
    "examplePrompts": [
        "Write a three sentence professional summary for a backend engineer with 5 years of Python experience",
        "Rewrite these experience bullets to emphasise measurable impact",
        "Suggest a skills section for a data analyst moving into machine learning",
        "Draft a cover letter opening paragraph based on my CV data",
    ],
    "tips": [
        "Keep one conversation per CV so follow-up requests reuse earlier answers",
        "Send structured cvData instead of pasting the whole CV into the prompt",
        "Use clearHistory when switching to an unrelated CV",
        "Lower the temperature for factual rewriting, raise it for creative summaries",
    ],
}
