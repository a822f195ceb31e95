"""Prompt builders for image analysis, prompt suggestions and the chat assistant."""

from __future__ import annotations

from typing import Optional

from models.ai_models import SuggestionType

CHAT_ACKNOWLEDGEMENT = "Understood! I'm ready to help users with EditZen's image editing features."


def analysis_prompt() -> str:
	"""Return the scene analysis instruction."""
	return (
		"Analyze this image and provide:\n"
		"1. A brief description (2-3 sentences)\n"
		"2. List of main objects detected (up to 5)\n"
		"3. Dominant colors (up to 4)\n"
		"4. Suggested transformations from: restore, fill, remove, recolor, removeBackground\n"
		"\n"
		"Respond in JSON format:\n"
		"{\n"
		'  "description": "...",\n'
		'  "objects": ["object1", "object2"],\n'
		'  "colors": ["color1", "color2"],\n'
		'  "suggestedTransformations": ["transform1", "transform2"]\n'
		"}"
	)


def suggestion_prompt(transformation_type: SuggestionType) -> str:
	"""Return the remove or recolor suggestion instruction."""
	if transformation_type is SuggestionType.REMOVE:
		return (
			"Analyze this image and suggest 4-5 objects that could be removed to improve the image.\n"
			"Focus on: distracting elements, unwanted objects, photobombers, text/watermarks, clutter.\n"
			"\n"
			"Respond in JSON array format:\n"
			"[\n"
			'  {"label": "Display Name", "value": "prompt to use", "confidence": 0.9},\n'
			"  ...\n"
			"]"
		)
	return (
		"Analyze this image and suggest 4-5 objects that could be recolored with recommended colors.\n"
		"Focus on: clothing, accessories, vehicles, furniture, backgrounds.\n"
		"\n"
		"Respond in JSON array format:\n"
		"[\n"
		'  {"label": "Blue Shirt", "value": "shirt", "suggestedColor": "navy blue", "confidence": 0.9},\n'
		"  ...\n"
		"]"
	)


def chat_system_prompt(transformation_type: Optional[str] = None) -> str:
	"""Return the assistant instruction, noting the active transformation if any."""
	prompt = (
		"You are a helpful AI assistant for EditZen, an AI-powered image editing application.\n"
		"You help users with:\n"
		"- Image restoration (removing noise/imperfections)\n"
		"- Generative fill (extending image dimensions)\n"
		"- Object removal (removing unwanted objects)\n"
		"- Object recoloring (changing colors of objects)\n"
		"- Background removal\n"
		"\n"
		"IMPORTANT: Respond in plain text only. Do NOT use markdown formatting like asterisks, "
		"bullet points, or bold text. Keep responses short and conversational.\n"
		"\n"
		"Be concise, friendly, and helpful. If users ask about features outside this scope, "
		"politely redirect them to the available editing features."
	)
	if transformation_type:
		prompt += f"\n\nCurrent transformation: {transformation_type}"
	return prompt
