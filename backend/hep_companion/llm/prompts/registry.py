# hep_companion/llm/prompts/registry.py

from dataclasses import dataclass

from hep_companion.llm.prompts import templates

@dataclass(frozen=True)
class PromptTemplate:
    name: str
    version: str
    template: str

PROMPTS: dict[tuple[str, str], PromptTemplate] = {
    ("hep_system", "v1"): PromptTemplate("hep_system", "v1", templates.HEP_SYSTEM_V1),
    ("hep_system_fallback", "v1"): PromptTemplate("hep_system_fallback", "v1", templates.HEP_SYSTEM_FALLBACK_V1),
}

def get_prompt(name: str, version: str) -> PromptTemplate:
    key = (name, version)
    if key not in PROMPTS:
        raise KeyError(f"Unknown prompt: {name}@{version}")
    return PROMPTS[key]

def render_template(template: str, variables: dict) -> str:
    out = template
    for k, v in variables.items():
        out = out.replace("{{" + k + "}}", str(v))
    return out.strip()
