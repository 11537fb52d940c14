import json

from cvgen.prompts import PromptComposer, build_improve_prompt, build_user_input, fill_template
from cvgen.schemas import GenerateRequest


def test_template_mode_substitutes_all_placeholders():
    composer = PromptComposer()
    req = GenerateRequest(prompt="C", customPromptTemplate="SYS:{system_prompt}|CTX:{context}|Q:{prompt}")
    assert composer.compose(req, context="A", system_prompt="B") == "SYS:B|CTX:A|Q:C"


def test_template_substitution_is_single_pass_and_literal():
    out = fill_template("{prompt} / {context} / {unknown}", context="ctx", system_prompt="sys", prompt="say {context}")
    assert out == "say {context} / ctx / {unknown}"


def test_default_mode_layout():
    composer = PromptComposer()
    req = GenerateRequest(prompt="Write a summary")
    out = composer.compose(req, context="User: hi\nAssistant: hello", system_prompt="You are a CV writer.")
    assert out == "You are a CV writer.\nUser: hi\nAssistant: hello\nUser: Write a summary\nResponse:"


def test_cv_data_is_embedded_before_prompt():
    cv = {"name": "Alice", "skills": ["Python"]}
    text = build_user_input("Write a summary", cv)
    assert text.startswith("CV data:\n")
    assert json.dumps(cv, indent=2) in text
    assert text.endswith("\n\nWrite a summary")

    assert build_user_input(None, cv) == "CV data:\n" + json.dumps(cv, indent=2)
    assert build_user_input("only prompt") == "only prompt"


def test_image_mode_yields_three_parts():
    composer = PromptComposer()
    image = {"data": "AAAA", "mediaType": "image/jpeg"}
    req = GenerateRequest(prompt="Describe my headshot")
    parts = composer.compose(req, context="ignored", system_prompt="SYS", image_part=image)
    assert parts == ["SYS", image, "Describe my headshot"]


def test_image_mode_applies_template_to_text_part():
    composer = PromptComposer()
    image = {"data": "AAAA", "mediaType": "image/jpeg"}
    req = GenerateRequest(prompt="Q", customPromptTemplate="[{context}] {prompt}")
    parts = composer.compose(req, context="CTX", system_prompt="SYS", image_part=image)
    assert parts == ["SYS", image, "[CTX] Q"]


def test_image_mode_uses_default_cue_when_template_renders_empty():
    composer = PromptComposer(image_prompt="Describe it")
    req = GenerateRequest(prompt="ignored by template", customPromptTemplate="{context}")
    parts = composer.compose(req, context="", system_prompt="SYS", image_part={"data": "x"})
    assert parts[-1] == "Describe it"


def test_blank_prompt_is_not_appended_to_cv_data():
    assert build_user_input("   ", {"name": "Alice"}) == 'CV data:\n{\n  "name": "Alice"\n}'
    assert build_user_input("  hi  ") == "hi"
    assert build_user_input(None, "") == ""


def test_improve_prompt_mentions_target():
    prompt = build_improve_prompt("Experience", "Did stuff", job_title="Data Engineer", industry="Fintech")
    assert "Experience" in prompt
    assert "Target job title: Data Engineer" in prompt
    assert "Industry: Fintech" in prompt
    assert prompt.endswith("Did stuff")
