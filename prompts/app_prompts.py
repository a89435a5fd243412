# Prompt templates for single-page web app generation
# Both templates end with a code-only directive so the reply can be rendered as-is

INITIAL_CODE_ONLY_DIRECTIVE = "Return ONLY the complete HTML code without any explanation."

UPDATE_CODE_ONLY_DIRECTIVE = (
    "Return ONLY the complete updated HTML code without any explanation or markdown."
)

INITIAL_GENERATION_PROMPT = """
Create a complete HTML webpage based on this description: "{user_prompt}".
The page should include:
- Modern, responsive design with CSS
- Some interactive elements using JavaScript
- Clean, well-structured code
- Appropriate styling and layout

The response must be a single, self-contained HTML document from `<!DOCTYPE html>` to `</html>`.

{directive}
"""

UPDATE_GENERATION_PROMPT = """
I have an HTML webpage that was created based on this description: "{user_prompt}".

The current HTML code is:
```html
{current_code}
```

Please update this HTML code according to this new request: "{update_prompt}"

Requirements:
- Preserve the overall structure but implement the requested changes
- Keep all existing functionality intact
- Maintain or improve responsive design
- Ensure the code is clean and well-formatted

{directive}
"""

PROMPT_TEMPLATES = {
    "initial": INITIAL_GENERATION_PROMPT,
    "update": UPDATE_GENERATION_PROMPT,
}


def get_template_by_name(name: str) -> str:
    """Get a prompt template by mode name."""
    try:
        return PROMPT_TEMPLATES[name]
    except KeyError:
        raise ValueError(f"Unknown prompt template: {name}")
