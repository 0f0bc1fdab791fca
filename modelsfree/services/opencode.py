"""OpenCode CLI 配置生成

把目录中的 (提供商, 模型) 映射为 OpenCode 的提供商和模型ID，生成 ~/.opencode.json
所需的配置内容和使用说明。NVIDIA NIM 通过 LOCAL_ENDPOINT 以 openai 提供商身份接入。
"""

import re
from typing import Any, Dict, Optional

NVIDIA_LOCAL_ENDPOINT = 'https://integrate.api.nvidia.com/v1'

OPENCODE_MODEL_ID_MAP: Dict[str, str] = {
    # Groq
    'groq:qwen-qwq-32b': 'qwen-qwq',
    'groq:llama-3.3-70b-versatile': 'llama-3.3-70b-versatile',
    'groq:meta-llama/llama-4-scout-17b-16e-instruct': 'meta-llama/llama-4-scout-17b-16e-instruct',
    'groq:meta-llama/llama-4-maverick-17b-128e-instruct':
        'meta-llama/llama-4-maverick-17b-128e-instruct',
    'groq:deepseek-r1-distill-llama-70b': 'deepseek-r1-distill-llama-70b',
    # OpenRouter
    'openrouter:openai/gpt-4.1': 'openrouter.gpt-4.1',
    'openrouter:openai/gpt-4.1-mini': 'openrouter.gpt-4.1-mini',
    'openrouter:openai/gpt-4o': 'openrouter.gpt-4o',
    'openrouter:openai/gpt-4o-mini': 'openrouter.gpt-4o-mini',
    'openrouter:anthropic/claude-3.5-sonnet': 'openrouter.claude-3.5-sonnet',
    'openrouter:anthropic/claude-3.7-sonnet': 'openrouter.claude-3.7-sonnet',
    'openrouter:google/gemini-2.5-flash-preview:thinking': 'openrouter.gemini-2.5-flash',
    'openrouter:deepseek/deepseek-r1-0528:free': 'openrouter.deepseek-r1-free',
    # Google AI
    'googleai:gemini-2.5-pro-preview-03-25': 'gemini-2.5-pro',
    'googleai:gemini-2.5-flash-preview-04-17': 'gemini-2.5-flash',
    'googleai:gemini-2.0-flash': 'gemini-2.0-flash',
}

OPENCODE_ENV_VAR_MAP: Dict[str, str] = {
    'anthropic': 'ANTHROPIC_API_KEY',
    'openai': 'OPENAI_API_KEY',
    'gemini': 'GEMINI_API_KEY',
    'groq': 'GROQ_API_KEY',
    'openrouter': 'OPENROUTER_API_KEY',
    'azure': 'AZURE_OPENAI_API_KEY',
    'bedrock': 'AWS_ACCESS_KEY_ID',
    'vertexai': 'GOOGLE_APPLICATION_CREDENTIALS',
    'copilot': 'GITHUB_TOKEN',
    'nvidia': 'NVIDIA_API_KEY',
}

PROVIDER_TO_OPENCODE: Dict[str, str] = {
    'groq': 'groq',
    'openrouter': 'openrouter',
    'googleai': 'gemini',
    'nvidia': 'nvidia',
}

AGENT_MAX_TOKENS = {
    'coder': 5000,
    'summarizer': 4000,
    'task': 5000,
    'title': 80,
}


def is_opencode_supported(provider_key: str, model_id: str) -> bool:
    return f"{provider_key}:{model_id}" in OPENCODE_MODEL_ID_MAP \
        or provider_key in PROVIDER_TO_OPENCODE


def get_opencode_provider(provider_key: str) -> Optional[str]:
    return PROVIDER_TO_OPENCODE.get(provider_key)


def get_opencode_model_id(provider_key: str, model_id: str) -> Optional[str]:
    """转换为 OpenCode 的模型ID，不支持时返回 None"""
    mapped = OPENCODE_MODEL_ID_MAP.get(f"{provider_key}:{model_id}")
    if mapped:
        return mapped

    if provider_key in ('groq', 'nvidia'):
        return model_id

    if provider_key == 'openrouter':
        return 'openrouter.' + model_id.replace('/', '-').replace(':', '-')

    if provider_key == 'googleai':
        return re.sub(r'-04-17$', '', re.sub(r'-preview.*$', '', model_id))

    return None


def generate_opencode_config(provider_key: str, model_id: str,
                             api_key: str) -> Optional[Dict[str, Any]]:
    """
    生成 OpenCode 配置

    Args:
        provider_key: 提供商标识
        model_id: 模型ID
        api_key: 写入配置的API密钥

    Returns:
        配置字典，不支持的模型返回 None
    """
    opencode_provider = get_opencode_provider(provider_key)
    opencode_model_id = get_opencode_model_id(provider_key, model_id)
    if not opencode_provider or not opencode_model_id:
        return None

    # NVIDIA NIM 是OpenAI兼容接口，配置在 openai 提供商下
    provider_name = 'openai' if opencode_provider == 'nvidia' else opencode_provider

    return {
        'providers': {
            provider_name: {'apiKey': api_key, 'disabled': False},
        },
        'agents': {
            agent: {'model': opencode_model_id, 'maxTokens': max_tokens}
            for agent, max_tokens in AGENT_MAX_TOKENS.items()
        },
        'autoCompact': True,
    }


def generate_opencode_instructions(provider_key: str, model_id: str,
                                   model_name: str) -> Dict[str, Any]:
    """生成在 OpenCode 中使用该模型的步骤说明"""
    opencode_provider = get_opencode_provider(provider_key)
    opencode_model_id = get_opencode_model_id(provider_key, model_id)

    if not opencode_provider or not opencode_model_id:
        return {
            'supported': False,
            'instructions': (
                f"This model ({provider_key}/{model_id}) is not directly supported in "
                "OpenCode CLI. OpenCode supports: Anthropic, OpenAI, Google Gemini, Groq, "
                "OpenRouter, Azure, AWS Bedrock, NVIDIA NIM, and GitHub Copilot."
            ),
        }

    env_var = OPENCODE_ENV_VAR_MAP[opencode_provider]

    if opencode_provider == 'nvidia':
        instructions = f"""To use "{model_name}" (NVIDIA NIM) in OpenCode CLI:

1. Set your NVIDIA API key:
   export NVIDIA_API_KEY="nvapi-xxx"

2. Set the LOCAL_ENDPOINT to NVIDIA's OpenAI-compatible API:
   export LOCAL_ENDPOINT="{NVIDIA_LOCAL_ENDPOINT}"

3. Create or update ~/.opencode.json with:
   {{
     "providers": {{
       "openai": {{
         "apiKey": "$NVIDIA_API_KEY"
       }}
     }},
     "agents": {{
       "coder": {{
         "model": "{opencode_model_id}",
         "maxTokens": 5000
       }}
     }}
   }}

4. Run OpenCode:
   LOCAL_ENDPOINT={NVIDIA_LOCAL_ENDPOINT} opencode

Note: NVIDIA NIM uses an OpenAI-compatible API, so it works via the LOCAL_ENDPOINT setting.
"""
    else:
        key_placeholder = 'AIza...' if env_var == 'GEMINI_API_KEY' else 'your-key-here'
        instructions = f"""To use "{model_name}" in OpenCode CLI:

1. Set your API key:
   export {env_var}="your-api-key"

2. Create or update ~/.opencode.json with:
   {{
     "providers": {{
       "{opencode_provider}": {{
         "apiKey": "{key_placeholder}"
       }}
     }},
     "agents": {{
       "coder": {{
         "model": "{opencode_model_id}",
         "maxTokens": 5000
       }}
     }}
   }}

3. Run OpenCode:
   opencode

4. Press Ctrl+O to select the model: {opencode_model_id}
"""

    return {
        'supported': True,
        'model_id': opencode_model_id,
        'provider': opencode_provider,
        'instructions': instructions,
    }
