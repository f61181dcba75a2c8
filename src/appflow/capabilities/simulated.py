"""
Simulated Capabilities

Canned executors for the builder's component types. They produce payloads
with the same shape a real backend would, derived from the step's config and
input, without calling any external service. Used for previews and tests.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from ..core.types import utc_timestamp

# Keys checked, in order, when a step receives a mapping instead of text
TEXT_KEYS = ("message", "text", "prompt", "response", "transcript", "output")


def extract_text(input: Any, *keys: str) -> Optional[str]:
    """
    Pull the text a component should work on out of its input.

    Strings are returned as-is. For mappings the given keys are tried first,
    then the common payload keys of the other components.
    """
    if isinstance(input, str):
        return input
    if isinstance(input, dict):
        for key in keys + TEXT_KEYS:
            value = input.get(key)
            if isinstance(value, str):
                return value
    return None


async def chatbot(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    prompt = config.get("prompt")
    model = config.get("model", "gpt-3.5-turbo")
    user_message = extract_text(input, "message")
    return {
        "type": "chatbot",
        "response": f'AI Response to: "{user_message}". Configuration: {prompt}',
        "model": model,
        "sessionId": session_id,
        "timestamp": utc_timestamp(),
    }


async def text_analysis(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    analysis_type = config.get("analysisType", "sentiment")
    text = extract_text(input, "text")
    return {
        "type": "text-analysis",
        "analysisType": analysis_type,
        "text": text,
        "result": {
            "sentiment": "positive",
            "confidence": 0.85,
            "keywords": ["AI", "platform", "development"],
            "summary": "Positive sentiment detected in the text about AI platform development.",
        },
        "timestamp": utc_timestamp(),
    }


async def image_generation(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    style = config.get("style", "realistic")
    size = config.get("size", "512x512")
    prompt = extract_text(input, "prompt")
    return {
        "type": "image-generation",
        "prompt": prompt,
        "style": style,
        "size": size,
        "imageUrl": (
            f"https://placeholder.image/generate?prompt={quote(prompt or '', safe='')}"
            f"&style={style}&size={size}"
        ),
        "timestamp": utc_timestamp(),
    }


async def data_processor(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    operation = config.get("operation", "transform")
    if isinstance(input, list):
        output = [
            {**(item if isinstance(item, dict) else {"value": item}),
             "id": index, "processed": True, "timestamp": utc_timestamp()}
            for index, item in enumerate(input)
        ]
    elif isinstance(input, dict):
        output = {**input, "processed": True, "timestamp": utc_timestamp()}
    else:
        output = {"value": input, "processed": True, "timestamp": utc_timestamp()}
    return {
        "type": "data-processor",
        "operation": operation,
        "input": input,
        "output": output,
    }


async def api_call(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "type": "api-call",
        "url": config.get("url"),
        "method": config.get("method", "POST"),
        "input": input,
        "response": {
            "status": "success",
            "data": {"message": "API call simulated successfully"},
            "timestamp": utc_timestamp(),
        },
    }


async def speech_to_text(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "type": "speech-to-text",
        "language": config.get("language", "en"),
        "model": config.get("model", "whisper-1"),
        "responseFormat": config.get("responseFormat", "text"),
        "input": input,
        "transcript": (
            "This is a simulated transcript from the audio input. "
            "The speech-to-text system would convert audio to text here."
        ),
        "confidence": 0.95,
        "timestamp": utc_timestamp(),
    }


async def document_analysis(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    extract_text_flag = config.get("extractText", True)
    extract_tables = config.get("extractTables", True)
    extract_images = config.get("extractImages", False)
    analysis_type = config.get("analysisType", "summary")
    return {
        "type": "document-analysis",
        "analysisType": analysis_type,
        "input": input,
        "results": {
            "extractedText": (
                "This is simulated extracted text from the document." if extract_text_flag else None
            ),
            "extractedTables": (
                [{"title": "Sample Table", "rows": 3, "columns": 4}] if extract_tables else None
            ),
            "extractedImages": ["image1.jpg", "image2.jpg"] if extract_images else None,
            "summary": (
                "This document contains information about AI applications and their use cases."
                if analysis_type == "summary" else None
            ),
            "keywords": (
                ["AI", "applications", "technology", "automation"]
                if analysis_type == "keywords" else None
            ),
            "sentiment": (
                {"score": 0.8, "label": "positive"} if analysis_type == "sentiment" else None
            ),
        },
        "timestamp": utc_timestamp(),
    }


async def code_generator(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    language = config.get("language", "javascript")
    framework = config.get("framework", "none")
    style = config.get("style", "functional")
    include_comments = config.get("includeComments", True)
    prompt = extract_text(input, "prompt")

    lines = []
    if include_comments:
        lines.append(f"// Generated code based on: {prompt}")
    lines.append("function simulatedFunction() {")
    if include_comments:
        lines.append("  // This is simulated generated code")
    lines.append(f'  return "Generated {language} code using {framework} framework";')
    lines.append("}")

    return {
        "type": "code-generator",
        "language": language,
        "framework": framework,
        "style": style,
        "prompt": prompt,
        "generatedCode": "\n".join(lines),
        "explanation": (
            "This function demonstrates the requested functionality." if include_comments else None
        ),
        "timestamp": utc_timestamp(),
    }


async def visual_search(config: Dict[str, Any], input: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    confidence = config.get("confidence", 0.7)
    max_results = config.get("maxResults", 10)
    include_labels = config.get("includeLabels", True)
    matches = [
        {
            "label": "Person" if include_labels else None,
            "confidence": 0.95,
            "boundingBox": {"x": 100, "y": 50, "width": 200, "height": 300},
        },
        {
            "label": "Car" if include_labels else None,
            "confidence": 0.87,
            "boundingBox": {"x": 300, "y": 200, "width": 150, "height": 100},
        },
    ]
    return {
        "type": "visual-search",
        "searchType": config.get("searchType", "objects"),
        "confidence": confidence,
        "maxResults": max_results,
        "input": input,
        "results": [m for m in matches if m["confidence"] >= confidence][:max_results],
        "timestamp": utc_timestamp(),
    }


SIMULATED_CAPABILITIES = {
    "chatbot": chatbot,
    "text-analysis": text_analysis,
    "image-generation": image_generation,
    "data-processor": data_processor,
    "api-call": api_call,
    "speech-to-text": speech_to_text,
    "document-analysis": document_analysis,
    "code-generator": code_generator,
    "visual-search": visual_search,
}
