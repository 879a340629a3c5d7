from typing import List

ANALYZE_SYSTEM_PROMPT = """You are an expert form designer. Analyze the user's request to:
1. Identify the core purpose and target audience
2. Suggest a clear, professional name for the chatflow (2-5 words)
3. Identify key data points needed

Return a JSON object with this structure:
{
  "suggestedName": "Professional Chatflow Name",
  "analysis": "Brief analysis of the request..."
}"""

GENERATE_SYSTEM_TEMPLATE = """You are an expert form designer. Generate a JSON schema for a data collection chatflow.

The schema should have a "fields" array. Each field object must have:
- id: unique string (e.g., "field_1")
- name: camelCase field name for data storage, letters and digits only (e.g., "fullName", "emailAddress")
- label: user-friendly question (e.g., "What is your full name?")
- type: one of {types}
- required: boolean
- placeholder: (optional) helpful placeholder text
- helperText: (optional) short hint shown under the question
- options: (optional) array of strings, ONLY for "select" type
- validation: (optional) object with rules like {{ "minLength": 5, "maxLength": 100, "pattern": "regex" }}

Field type guidelines:
- "text": short text (name, title, etc.)
- "textarea": long text (descriptions, comments, etc.)
- "email": email addresses
- "phone": phone numbers
- "url": website URLs
- "number": numeric values
- "date": date selection
- "select": multiple choice with options array
- "boolean": yes/no questions
- "file": file uploads (images, documents)

Use no other type names.

Example output:
{{
  "fields": [
    {{ "id": "f1", "name": "fullName", "label": "What is your full name?", "type": "text", "required": true, "placeholder": "John Doe" }},
    {{ "id": "f2", "name": "serviceRating", "label": "How would you rate our service?", "type": "select", "required": true, "options": ["Excellent", "Good", "Fair", "Poor"] }},
    {{ "id": "f3", "name": "additionalComments", "label": "Any additional comments?", "type": "textarea", "required": false }}
  ]
}}

Return ONLY the JSON object. Do not include markdown formatting or explanations."""

MIN_FIELDS = 5
MAX_FIELDS = 12


def analyze_user_prompt(description: str) -> str:
    return f'Analyze this chatflow request: "{description}"'


def generate_system_prompt(field_types: List[str]) -> str:
    return GENERATE_SYSTEM_TEMPLATE.format(types=", ".join(f'"{t}"' for t in field_types))


def generate_user_prompt(description: str, analysis: str) -> str:
    return (
        f"Description: {description}\n\n"
        f"Analysis: {analysis}\n\n"
        f"Generate the JSON schema with {MIN_FIELDS}-{MAX_FIELDS} relevant fields."
    )
