"""Prompt builders for multimodal plant disease analysis."""

from models.languages import Language

RECORD_TEMPLATE = """{{
  "diseaseName": "Name of the disease in {language}",
  "scientificName": "Scientific name of the disease",
  "confidence": 85,
  "severity": "moderate",
  "description": "Detailed description in {language}",
  "symptoms": ["symptom1", "symptom2", "symptom3"],
  "causes": ["cause1", "cause2"],
  "treatment": ["treatment1", "treatment2", "treatment3"],
  "prevention": ["prevention1", "prevention2"],
  "affectedParts": ["leaves", "stems", "roots"],
  "spreadRate": "moderate"
}}"""


def build_system_prompt(language: Language) -> str:
    """Return the system prompt asking for a JSON diagnosis in `language`."""
    return (
        "You are an expert plant pathologist AI assistant. "
        "Analyze the plant image and provide a comprehensive disease diagnosis.\n\n"
        f"IMPORTANT: Respond in {language.name} language. Every free-text field "
        f"(diseaseName, description, symptoms, causes, treatment, prevention, affectedParts) "
        f"must be written in {language.name}.\n\n"
        "Provide your analysis in the following JSON format:\n"
        f"{RECORD_TEMPLATE.format(language=language.name)}\n\n"
        'Severity must be one of: "low", "moderate", "high", "critical"\n'
        "Confidence should be an integer between 0-100.\n"
        'Spread rate must be one of: "low", "moderate", "high"'
    )


def build_user_prompt(language: Language) -> str:
    """Return the text directive that accompanies the image."""
    return f"Analyze this plant image for diseases. Provide the response in {language.name} language."
