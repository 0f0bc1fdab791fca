"""提供商配置表"""

from typing import Dict

from ..models.catalogue import ProviderConfig

PROVIDERS: Dict[str, ProviderConfig] = {
    'nvidia': ProviderConfig(
        key='nvidia',
        name='NIM',
        url='https://integrate.api.nvidia.com/v1/chat/completions',
        env_var_name='NVIDIA_API_KEY',
        probe_endpoint='https://integrate.api.nvidia.com/v1/chat/completions',
        ping_model='meta/llama-3.1-8b-instruct',
        key_prefix='nvapi-',
        hint='Profile → API Keys → Generate',
    ),
    'groq': ProviderConfig(
        key='groq',
        name='Groq',
        url='https://api.groq.com/openai/v1/chat/completions',
        env_var_name='GROQ_API_KEY',
        probe_endpoint='https://api.groq.com/openai/v1/chat/completions',
        ping_model='llama-3.1-8b-instant',
        key_prefix='gsk_',
        hint='API Keys → Create API Key',
    ),
    'cerebras': ProviderConfig(
        key='cerebras',
        name='Cerebras',
        url='https://api.cerebras.ai/v1/chat/completions',
        env_var_name='CEREBRAS_API_KEY',
        probe_endpoint='https://api.cerebras.ai/v1/chat/completions',
        ping_model='llama3.1-8b',
        key_prefix='csk_ / cauth_',
        hint='API Keys → Create',
    ),
    'sambanova': ProviderConfig(
        key='sambanova',
        name='SambaNova',
        url='https://api.sambanova.ai/v1/chat/completions',
        env_var_name='SAMBANOVA_API_KEY',
        probe_endpoint='https://api.sambanova.ai/v1/chat/completions',
        ping_model='Meta-Llama-3.1-8B-Instruct',
        key_prefix='sn-',
        hint='API Keys → Create ($5 free trial, 3 months)',
    ),
    'openrouter': ProviderConfig(
        key='openrouter',
        name='OpenRouter',
        url='https://openrouter.ai/api/v1/chat/completions',
        env_var_name='OPENROUTER_API_KEY',
        probe_endpoint='https://openrouter.ai/api/v1/chat/completions',
        ping_model='openrouter/free',
        key_prefix='sk-or-',
        hint='API Keys → Create key (50 free req/day)',
    ),
    'codestral': ProviderConfig(
        key='codestral',
        name='Codestral',
        url='https://codestral.mistral.ai/v1/chat/completions',
        env_var_name='CODESTRAL_API_KEY',
        probe_endpoint='https://codestral.mistral.ai/v1/chat/completions',
        ping_model='codestral-latest',
        key_prefix='csk-',
        hint='API Keys → Create key (30 req/min, phone required)',
    ),
    # Google AI Studio 的探测走 generateContent 接口，密钥放在查询参数里
    'googleai': ProviderConfig(
        key='googleai',
        name='Google AI',
        url='https://generativelanguage.googleapis.com/v1beta/openai/chat/completions',
        env_var_name='GOOGLE_API_KEY',
        probe_endpoint='https://generativelanguage.googleapis.com/v1beta/models',
        ping_model='gemma-3-4b-it',
        api_style='google',
        key_prefix='AIza',
        hint='Get API key (free Gemma models, 14.4K req/day)',
    ),
    'mistral': ProviderConfig(
        key='mistral',
        name='Mistral AI',
        url='https://api.mistral.ai/v1/chat/completions',
        env_var_name='MISTRAL_API_KEY',
        probe_endpoint='https://api.mistral.ai/v1/chat/completions',
        ping_model='open-mistral-nemo',
        key_prefix='',
        hint='La Plateforme → API Keys (free tier available)',
    ),
    'fireworks': ProviderConfig(
        key='fireworks',
        name='Fireworks AI',
        url='https://api.fireworks.ai/inference/v1/chat/completions',
        env_var_name='FIREWORKS_API_KEY',
        probe_endpoint='https://api.fireworks.ai/inference/v1/chat/completions',
        ping_model='accounts/fireworks/models/gpt-oss-20b',
        key_prefix='fw_',
        hint='$6 free credit on signup, then pay-per-use',
    ),
    'hyperbolic': ProviderConfig(
        key='hyperbolic',
        name='Hyperbolic',
        url='https://api.hyperbolic.xyz/v1/chat/completions',
        env_var_name='HYPERBOLIC_API_KEY',
        probe_endpoint='https://api.hyperbolic.xyz/v1/chat/completions',
        ping_model='meta-llama/Meta-Llama-3.1-8B-Instruct',
        key_prefix='sk_live_',
        hint='$1 free credit on signup, then pay-per-use',
    ),
}
