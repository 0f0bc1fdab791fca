"""测试OpenCode配置生成"""

from modelsfree.services.opencode import (
    AGENT_MAX_TOKENS, NVIDIA_LOCAL_ENDPOINT, generate_opencode_config,
    generate_opencode_instructions, get_opencode_model_id, get_opencode_provider,
    is_opencode_supported
)


class TestModelIdMapping:
    """测试模型ID转换"""

    def test_explicit_mapping(self):
        assert get_opencode_model_id('groq', 'qwen-qwq-32b') == 'qwen-qwq'
        assert get_opencode_model_id(
            'openrouter', 'deepseek/deepseek-r1-0528:free') == 'openrouter.deepseek-r1-free'

    def test_passthrough_providers(self):
        assert get_opencode_model_id('groq', 'llama-3.1-8b-instant') == 'llama-3.1-8b-instant'
        assert get_opencode_model_id('nvidia', 'z-ai/glm5') == 'z-ai/glm5'

    def test_openrouter_fallback(self):
        assert get_opencode_model_id(
            'openrouter', 'qwen/qwen3-coder:free') == 'openrouter.qwen-qwen3-coder-free'

    def test_googleai_fallback(self):
        assert get_opencode_model_id('googleai', 'gemini-2.5-flash-preview-05-20') == \
            'gemini-2.5-flash'
        assert get_opencode_model_id('googleai', 'gemma-3-4b-it') == 'gemma-3-4b-it'

    def test_unsupported_provider(self):
        assert get_opencode_model_id('cerebras', 'llama3.1-8b') is None
        assert get_opencode_provider('cerebras') is None
        assert not is_opencode_supported('cerebras', 'llama3.1-8b')

    def test_supported(self):
        assert is_opencode_supported('groq', 'anything')
        assert get_opencode_provider('googleai') == 'gemini'


class TestGenerateConfig:
    """测试配置生成"""

    def test_groq_config(self):
        config = generate_opencode_config('groq', 'llama-3.1-8b-instant', 'gsk_abc')

        assert config['providers'] == {'groq': {'apiKey': 'gsk_abc', 'disabled': False}}
        assert config['autoCompact'] is True
        assert set(config['agents']) == set(AGENT_MAX_TOKENS)
        assert config['agents']['coder'] == {'model': 'llama-3.1-8b-instant', 'maxTokens': 5000}
        assert config['agents']['title']['maxTokens'] == 80

    def test_nvidia_uses_openai_provider(self):
        config = generate_opencode_config('nvidia', 'z-ai/glm5', 'nvapi-abc')
        assert list(config['providers']) == ['openai']

    def test_unsupported(self):
        assert generate_opencode_config('hyperbolic', 'openai/gpt-oss-120b', 'k') is None


class TestInstructions:
    """测试使用说明"""

    def test_unsupported(self):
        result = generate_opencode_instructions('sambanova', 'Qwen3-32B', 'Qwen3 32B')
        assert result['supported'] is False
        assert 'not directly supported' in result['instructions']

    def test_nvidia(self):
        result = generate_opencode_instructions('nvidia', 'z-ai/glm5', 'GLM 5')
        assert result['supported'] is True
        assert result['provider'] == 'nvidia'
        assert NVIDIA_LOCAL_ENDPOINT in result['instructions']
        assert 'NVIDIA_API_KEY' in result['instructions']

    def test_gemini(self):
        result = generate_opencode_instructions('googleai', 'gemma-3-4b-it', 'Gemma 3 4B')
        assert result['model_id'] == 'gemma-3-4b-it'
        assert 'export GEMINI_API_KEY' in result['instructions']
        assert 'AIza...' in result['instructions']
