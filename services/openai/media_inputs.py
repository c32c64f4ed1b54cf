"""Utilities to build multimodal chat messages for the analysis request."""

from typing import Any, Dict, List

from models.analysis_record import SourceImage


def build_user_content(user_prompt: str, image: SourceImage) -> List[Dict[str, Any]]:
    """Compose the user turn as a text directive followed by the image."""
    return [
        {"type": "text", "text": user_prompt},
        {"type": "image_url", "image_url": {"url": image.to_data_url()}},
    ]


def build_messages(system_prompt: str, user_prompt: str, image: SourceImage) -> List[Dict[str, Any]]:
    """Build the chat completions message array for one analysis."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": build_user_content(user_prompt, image)},
    ]
