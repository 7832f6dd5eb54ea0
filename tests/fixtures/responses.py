FACADE_RESPONSE = {"text": "hello", "model": "llama3.2:3b"}

NESTED_FACADE_RESPONSE = {"output": {"text": "nested hello"}}

CHAT_COMPLETION_RESPONSE = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "hi"},
            "finish_reason": "stop"
        }
    ],
    "usage": {"prompt_tokens": 12, "completion_tokens": 1, "total_tokens": 13}
}

EMPTY_CHAT_COMPLETION_RESPONSE = {
    "id": "chatcmpl-456",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": ""},
            "finish_reason": "length"
        }
    ]
}

GEMINI_RESPONSE = {
    "candidates": [
        {
            "content": {"role": "model", "parts": [{"text": "a"}, {"text": "b"}]},
            "finishReason": "STOP"
        }
    ],
    "usageMetadata": {"promptTokenCount": 5, "candidatesTokenCount": 2}
}

GEMINI_BLOCKED_FIRST_CANDIDATE = {
    "candidates": [
        {"content": {"parts": [{"text": "   "}]}, "finishReason": "SAFETY"},
        {"content": {"parts": [{"text": "second candidate"}]}}
    ]
}

FIREBASE_LOOKUP_ADMIN = {
    "kind": "identitytoolkit#GetAccountInfoResponse",
    "users": [
        {
            "localId": "admin-1",
            "email": "admin@example.com",
            "customAttributes": "{\"role\":\"admin\",\"company\":\"Reimagina\"}"
        }
    ]
}

FIREBASE_LOOKUP_MEMBER = {
    "users": [
        {"localId": "user-1", "email": "member@example.com"}
    ]
}


def optimizer_payload(provider="openai", model="gpt-5-mini", **overrides):
    """Optimizer as sent by the chat UI (camelCase)."""
    payload = {
        "id": "linkedin-optimizer",
        "name": "Reimagina LinkedIn Optimizer",
        "systemPrompt": "You are an expert LinkedIn content creator for B2B founders.",
        "knowledgeBase": [
            {"id": "kb-1", "name": "Reimagina Value Proposition"},
            {"id": "kb-2", "name": "Key B2B Founder Pain Points"}
        ],
        "model": {
            "provider": provider,
            "model": model,
            "temperature": 0.7,
            "maxTokens": 1024,
            "topP": 0.9
        },
        "generationParams": {"variants": 3, "preferredLength": "Medium"}
    }
    payload.update(overrides)
    return payload
