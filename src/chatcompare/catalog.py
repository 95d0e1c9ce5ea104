"""Static catalog of OpenRouter models offered for comparison.

Reference data only: the dispatcher accepts any identifier, listed here or not.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ModelInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    provider: str
    pricing: str = "Free"


OPENROUTER_MODELS: List[ModelInfo] = [
    ModelInfo(name="meta-llama/llama-3.1-8b-instruct", label="Llama 3.1 8B Instruct", provider="Meta"),
    ModelInfo(name="meta-llama/llama-3.1-70b-instruct", label="Llama 3.1 70B Instruct", provider="Meta"),
    ModelInfo(name="mistralai/mistral-7b-instruct", label="Mistral 7B Instruct", provider="Mistral AI"),
    ModelInfo(name="mistralai/mistral-7b-instruct:free", label="Mistral 7B Instruct (Free)", provider="Mistral AI"),
    ModelInfo(name="perplexity/llama-3.1-8b-instruct", label="Perplexity Llama 3.1 8B", provider="Perplexity"),
    ModelInfo(name="nousresearch/nous-hermes-2-mixtral-8x7b-dpo", label="Nous Hermes 2 Mixtral", provider="Nous Research"),
    ModelInfo(name="nousresearch/nous-hermes-2-mixtral-8x7b-dpo:free", label="Nous Hermes 2 Mixtral (Free)", provider="Nous Research"),
    ModelInfo(name="microsoft/phi-3-mini-4k-instruct", label="Phi-3 Mini 4K Instruct", provider="Microsoft"),
    ModelInfo(name="microsoft/phi-3-mini-4k-instruct:free", label="Phi-3 Mini 4K Instruct (Free)", provider="Microsoft"),
    ModelInfo(name="google/gemini-2.0-flash-exp", label="Gemini 2.0 Flash Exp", provider="Google"),
    ModelInfo(name="google/gemini-2.0-flash-exp:free", label="Gemini 2.0 Flash Exp (Free)", provider="Google"),
    ModelInfo(name="anthropic/claude-3-haiku", label="Claude 3 Haiku", provider="Anthropic"),
    ModelInfo(name="anthropic/claude-3-haiku:free", label="Claude 3 Haiku (Free)", provider="Anthropic"),
    ModelInfo(name="openai/gpt-4o-mini", label="GPT-4o Mini", provider="OpenAI"),
    ModelInfo(name="openai/gpt-4o-mini:free", label="GPT-4o Mini (Free)", provider="OpenAI"),
    ModelInfo(name="deepseek/deepseek-chat", label="DeepSeek Chat", provider="DeepSeek"),
    ModelInfo(name="deepseek/deepseek-chat:free", label="DeepSeek Chat (Free)", provider="DeepSeek"),
    ModelInfo(name="qwen/qwen2.5-7b-instruct", label="Qwen 2.5 7B Instruct", provider="Qwen"),
    ModelInfo(name="qwen/qwen2.5-7b-instruct:free", label="Qwen 2.5 7B Instruct (Free)", provider="Qwen"),
    ModelInfo(name="01-ai/yi-1.5-6b-chat", label="Yi 1.5 6B Chat", provider="01.AI"),
    ModelInfo(name="01-ai/yi-1.5-6b-chat:free", label="Yi 1.5 6B Chat (Free)", provider="01.AI"),
]


def available_models() -> List[ModelInfo]:
    return list(OPENROUTER_MODELS)


def get_model(name: str) -> Optional[ModelInfo]:
    return next((m for m in OPENROUTER_MODELS if m.name == name), None)
