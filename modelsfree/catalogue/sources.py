"""各提供商的免费模型表

每行格式: (model_id, label, tier, swe_score, ctx)
"""

from typing import Dict, List, Tuple

ModelRow = Tuple[str, str, str, str, str]

NVIDIA_MODELS: List[ModelRow] = [
    # S+ : SWE-bench Verified >= 70%
    ('deepseek-ai/deepseek-v3.2', 'DeepSeek V3.2', 'S+', '73.1%', '128k'),
    ('moonshotai/kimi-k2.5', 'Kimi K2.5', 'S+', '76.8%', '128k'),
    ('z-ai/glm5', 'GLM 5', 'S+', '77.8%', '128k'),
    ('z-ai/glm4.7', 'GLM 4.7', 'S+', '73.8%', '200k'),
    ('moonshotai/kimi-k2-thinking', 'Kimi K2 Thinking', 'S+', '71.3%', '256k'),
    ('minimaxai/minimax-m2.1', 'MiniMax M2.1', 'S+', '74.0%', '200k'),
    ('stepfun-ai/step-3.5-flash', 'Step 3.5 Flash', 'S+', '74.4%', '256k'),
    ('qwen/qwen3-coder-480b-a35b-instruct', 'Qwen3 Coder 480B', 'S+', '70.6%', '256k'),
    ('qwen/qwen3-235b-a22b', 'Qwen3 235B', 'S+', '70.0%', '128k'),
    ('mistralai/devstral-2-123b-instruct-2512', 'Devstral 2 123B', 'S+', '72.2%', '256k'),
    # S : 60-70%
    ('deepseek-ai/deepseek-v3.1-terminus', 'DeepSeek V3.1 Term', 'S', '68.4%', '128k'),
    ('moonshotai/kimi-k2-instruct', 'Kimi K2 Instruct', 'S', '65.8%', '128k'),
    ('minimaxai/minimax-m2', 'MiniMax M2', 'S', '69.4%', '128k'),
    ('qwen/qwen3-next-80b-a3b-thinking', 'Qwen3 80B Thinking', 'S', '68.0%', '128k'),
    ('qwen/qwen3-next-80b-a3b-instruct', 'Qwen3 80B Instruct', 'S', '65.0%', '128k'),
    ('qwen/qwen3.5-397b-a17b', 'Qwen3.5 400B VLM', 'S', '68.0%', '128k'),
    ('openai/gpt-oss-120b', 'GPT OSS 120B', 'S', '60.0%', '128k'),
    ('meta/llama-4-maverick-17b-128e-instruct', 'Llama 4 Maverick', 'S', '62.0%', '1M'),
    ('deepseek-ai/deepseek-v3.1', 'DeepSeek V3.1', 'S', '62.0%', '128k'),
    # A+ : 50-60%
    ('nvidia/llama-3.1-nemotron-ultra-253b-v1', 'Nemotron Ultra 253B', 'A+', '56.0%', '128k'),
    ('mistralai/mistral-large-3-675b-instruct-2512', 'Mistral Large 675B', 'A+', '58.0%', '256k'),
    ('qwen/qwq-32b', 'QwQ 32B', 'A+', '50.0%', '131k'),
    ('igenius/colosseum_355b_instruct_16k', 'Colosseum 355B', 'A+', '52.0%', '16k'),
    # A : 40-50%
    ('mistralai/mistral-medium-3-instruct', 'Mistral Medium 3', 'A', '48.0%', '128k'),
    ('mistralai/magistral-small-2506', 'Magistral Small', 'A', '45.0%', '32k'),
    ('nvidia/llama-3.3-nemotron-super-49b-v1.5', 'Nemotron Super 49B', 'A', '49.0%', '128k'),
    ('meta/llama-4-scout-17b-16e-instruct', 'Llama 4 Scout', 'A', '44.0%', '10M'),
    ('nvidia/nemotron-3-nano-30b-a3b', 'Nemotron Nano 30B', 'A', '43.0%', '128k'),
    ('deepseek-ai/deepseek-r1-distill-qwen-32b', 'R1 Distill 32B', 'A', '43.9%', '128k'),
    ('openai/gpt-oss-20b', 'GPT OSS 20B', 'A', '42.0%', '128k'),
    ('qwen/qwen2.5-coder-32b-instruct', 'Qwen2.5 Coder 32B', 'A', '46.0%', '32k'),
    ('meta/llama-3.1-405b-instruct', 'Llama 3.1 405B', 'A', '44.0%', '128k'),
    # A- : 35-40%
    ('meta/llama-3.3-70b-instruct', 'Llama 3.3 70B', 'A-', '39.5%', '128k'),
    ('deepseek-ai/deepseek-r1-distill-qwen-14b', 'R1 Distill 14B', 'A-', '37.7%', '64k'),
    ('bytedance/seed-oss-36b-instruct', 'Seed OSS 36B', 'A-', '38.0%', '32k'),
    ('stockmark/stockmark-2-100b-instruct', 'Stockmark 100B', 'A-', '36.0%', '32k'),
    # B+ : 30-35%
    ('mistralai/mixtral-8x22b-instruct-v0.1', 'Mixtral 8x22B', 'B+', '32.0%', '64k'),
    ('mistralai/ministral-14b-instruct-2512', 'Ministral 14B', 'B+', '34.0%', '32k'),
    ('ibm/granite-34b-code-instruct', 'Granite 34B Code', 'B+', '30.0%', '32k'),
    # B : 20-30%
    ('deepseek-ai/deepseek-r1-distill-llama-8b', 'R1 Distill 8B', 'B', '28.2%', '32k'),
    ('deepseek-ai/deepseek-r1-distill-qwen-7b', 'R1 Distill 7B', 'B', '22.6%', '32k'),
    # C : < 20%
    ('google/gemma-2-9b-it', 'Gemma 2 9B', 'C', '18.0%', '8k'),
    ('microsoft/phi-3.5-mini-instruct', 'Phi 3.5 Mini', 'C', '12.0%', '128k'),
    ('microsoft/phi-4-mini-instruct', 'Phi 4 Mini', 'C', '14.0%', '128k'),
]

GROQ_MODELS: List[ModelRow] = [
    ('moonshotai/kimi-k2-instruct', 'Kimi K2 Instruct', 'S', '65.8%', '131k'),
    ('moonshotai/kimi-k2-instruct-0905', 'Kimi K2 0905', 'S', '65.8%', '262k'),
    ('meta-llama/llama-4-maverick-17b-128e-instruct', 'Llama 4 Maverick', 'S', '62.0%', '1M'),
    ('openai/gpt-oss-120b', 'GPT OSS 120B', 'S', '60.0%', '128k'),
    ('qwen/qwen3-32b', 'Qwen3 32B', 'A+', '50.0%', '131k'),
    ('meta-llama/llama-4-scout-17b-16e-instruct', 'Llama 4 Scout', 'A', '44.0%', '10M'),
    ('openai/gpt-oss-20b', 'GPT OSS 20B', 'A', '42.0%', '128k'),
    ('llama-3.3-70b-versatile', 'Llama 3.3 70B', 'A-', '39.5%', '128k'),
    ('llama-3.1-8b-instant', 'Llama 3.1 8B', 'B', '28.8%', '128k'),
    ('groq/compound', 'Compound', 'A+', '52.0%', '131k'),
    ('groq/compound-mini', 'Compound Mini', 'A', '45.0%', '131k'),
]

CEREBRAS_MODELS: List[ModelRow] = [
    ('qwen-3-235b-a22b-instruct-2507', 'Qwen3 235B', 'S+', '70.0%', '128k'),
    ('gpt-oss-120b', 'GPT OSS 120B', 'S', '60.0%', '128k'),
    ('zai-glm-4.7', 'GLM 4.7', 'A+', '52.0%', '128k'),
    ('llama3.1-8b', 'Llama 3.1 8B', 'B', '28.8%', '128k'),
]

SAMBANOVA_MODELS: List[ModelRow] = [
    ('Qwen3-235B', 'Qwen3 235B', 'S+', '70.0%', '128k'),
    ('DeepSeek-V3.2', 'DeepSeek V3.2', 'S+', '68.0%', '128k'),
    ('DeepSeek-V3.1-Terminus', 'DeepSeek V3.1 Term', 'S', '68.4%', '128k'),
    ('DeepSeek-R1-0528', 'DeepSeek R1 0528', 'S', '61.0%', '128k'),
    ('DeepSeek-V3.1', 'DeepSeek V3.1', 'S', '62.0%', '128k'),
    ('DeepSeek-V3-0324', 'DeepSeek V3 0324', 'S', '62.0%', '128k'),
    ('Llama-4-Maverick-17B-128E-Instruct', 'Llama 4 Maverick', 'S', '62.0%', '1M'),
    ('gpt-oss-120b', 'GPT OSS 120B', 'S', '60.0%', '128k'),
    ('Qwen3-32B', 'Qwen3 32B', 'A+', '50.0%', '128k'),
    ('DeepSeek-R1-Distill-Llama-70B', 'R1 Distill 70B', 'A', '43.9%', '128k'),
    ('Meta-Llama-3.3-70B-Instruct', 'Llama 3.3 70B', 'A-', '39.5%', '128k'),
    ('Meta-Llama-3.1-8B-Instruct', 'Llama 3.1 8B', 'B', '28.8%', '128k'),
]

OPENROUTER_MODELS: List[ModelRow] = [
    ('qwen/qwen3-coder:free', 'Qwen3 Coder', 'S+', '70.6%', '256k'),
    ('stepfun/step-3.5-flash:free', 'Step 3.5 Flash', 'S+', '74.4%', '256k'),
    ('deepseek/deepseek-r1-0528:free', 'DeepSeek R1 0528', 'S', '61.0%', '128k'),
    ('qwen/qwen3-next-80b-a3b-instruct:free', 'Qwen3 80B Instruct', 'S', '65.0%', '128k'),
    ('openai/gpt-oss-120b:free', 'GPT OSS 120B', 'S', '60.0%', '128k'),
    ('nousresearch/hermes-3-llama-3.1-405b:free', 'Hermes 3 405B', 'A+', '50.0%', '128k'),
    ('arcee-ai/trinity-large-preview:free', 'Trinity Large', 'A+', '48.0%', '128k'),
    ('upstage/solar-pro-3:free', 'Solar Pro 3', 'A', '45.0%', '128k'),
    ('z-ai/glm-4.5-air:free', 'GLM 4.5 Air', 'A', '44.0%', '128k'),
    ('openai/gpt-oss-20b:free', 'GPT OSS 20B', 'A', '42.0%', '128k'),
    ('nvidia/nemotron-3-nano-30b-a3b:free', 'Nemotron Nano 30B', 'A', '43.0%', '128k'),
    ('meta-llama/llama-3.3-70b-instruct:free', 'Llama 3.3 70B', 'A-', '39.5%', '128k'),
    ('mistralai/mistral-small-3.1-24b-instruct:free', 'Mistral Small 3.1', 'A-', '38.0%', '128k'),
    ('meta-llama/llama-3.2-3b-instruct:free', 'Llama 3.2 3B', 'B+', '35.0%', '128k'),
    ('arcee-ai/trinity-mini:free', 'Trinity Mini', 'B+', '34.0%', '128k'),
    ('google/gemma-3-27b-it:free', 'Gemma 3 27B', 'B', '22.0%', '128k'),
    ('google/gemma-3-12b-it:free', 'Gemma 3 12B', 'C', '15.0%', '128k'),
    ('google/gemma-3-4b-it:free', 'Gemma 3 4B', 'C', '10.0%', '128k'),
    ('google/gemma-3n-e4b-it:free', 'Gemma 3n 4B', 'C', '12.0%', '128k'),
    ('google/gemma-3n-e2b-it:free', 'Gemma 3n 2B', 'C', '8.0%', '128k'),
    ('qwen/qwen3-4b:free', 'Qwen3 4B', 'C+', '18.0%', '128k'),
    ('nvidia/nemotron-nano-12b-v2-vl:free', 'Nemotron Nano 12B VL', 'B', '25.0%', '128k'),
    ('nvidia/nemotron-nano-9b-v2:free', 'Nemotron Nano 9B', 'B-', '20.0%', '128k'),
    ('liquid/lfm-2.5-1.2b-instruct:free', 'LFM 2.5 1.2B', 'D', '5.0%', '128k'),
    ('liquid/lfm-2.5-1.2b-thinking:free', 'LFM 2.5 Thinking', 'D', '5.0%', '128k'),
    ('cognitivecomputations/dolphin-mistral-24b-venice-edition:free', 'Dolphin Venice', 'B', '28.0%', '128k'),
]

CODESTRAL_MODELS: List[ModelRow] = [
    ('codestral-latest', 'Codestral', 'B+', '34.0%', '256k'),
]

GOOGLEAI_MODELS: List[ModelRow] = [
    ('gemma-3-27b-it', 'Gemma 3 27B', 'B', '22.0%', '128k'),
    ('gemma-3-12b-it', 'Gemma 3 12B', 'C', '15.0%', '128k'),
    ('gemma-3-4b-it', 'Gemma 3 4B', 'C', '10.0%', '128k'),
    ('gemma-3-1b-it', 'Gemma 3 1B', 'D', '5.0%', '128k'),
    ('gemma-3n-e4b-it', 'Gemma 3n 4B', 'C', '12.0%', '128k'),
    ('gemma-3n-e2b-it', 'Gemma 3n 2B', 'D', '8.0%', '128k'),
]

MISTRAL_MODELS: List[ModelRow] = [
    ('mistral-large-latest', 'Mistral Large', 'S', '62.0%', '128k'),
    ('mistral-medium-latest', 'Mistral Medium', 'A', '48.0%', '128k'),
    ('mistral-small-latest', 'Mistral Small', 'A-', '38.0%', '128k'),
    ('open-mistral-nemo', 'Mistral Nemo', 'B+', '32.0%', '131k'),
    ('open-codestral-mamba', 'Codestral Mamba', 'B+', '34.0%', '256k'),
    ('devstral-small-latest', 'Devstral Small', 'B+', '34.0%', '128k'),
    ('ministral-3b-latest', 'Ministral 3B', 'B-', '20.0%', '128k'),
    ('ministral-8b-latest', 'Ministral 8B', 'B', '25.0%', '128k'),
]

FIREWORKS_MODELS: List[ModelRow] = [
    ('accounts/fireworks/models/glm-5', 'GLM 5', 'S+', '77.8%', '200k'),
    ('accounts/fireworks/models/deepseek-v3p2', 'DeepSeek V3.2', 'S+', '73.1%', '163k'),
    ('accounts/fireworks/models/kimi-k2-instruct-0905', 'Kimi K2 Instruct', 'S', '65.8%', '262k'),
    ('accounts/fireworks/models/minimax-m2p1', 'MiniMax M2.1', 'A+', '58.0%', '204k'),
    ('accounts/fireworks/models/gpt-oss-120b', 'GPT OSS 120B', 'S', '60.0%', '131k'),
    ('accounts/fireworks/models/gpt-oss-20b', 'GPT OSS 20B', 'A', '42.0%', '131k'),
    ('accounts/fireworks/models/mixtral-8x22b-instruct', 'Mixtral 8x22B', 'B+', '32.0%', '65k'),
]

HYPERBOLIC_MODELS: List[ModelRow] = [
    ('Qwen/Qwen3-Coder-480B-A35B-Instruct', 'Qwen3 Coder 480B', 'S+', '70.6%', '262k'),
    ('deepseek-ai/DeepSeek-R1', 'DeepSeek R1', 'S+', '72.0%', '163k'),
    ('Qwen/Qwen2.5-72B-Instruct', 'Qwen2.5 72B', 'S', '65.0%', '131k'),
    ('deepseek-ai/DeepSeek-V3', 'DeepSeek V3', 'S', '62.0%', '131k'),
    ('meta-llama/Llama-3.3-70B-Instruct', 'Llama 3.3 70B', 'A-', '39.5%', '131k'),
    ('openai/gpt-oss-120b', 'GPT OSS 120B', 'S', '60.0%', '131k'),
    ('Qwen/Qwen3-235B-A22B', 'Qwen3 235B', 'S+', '70.0%', '40k'),
    ('Qwen/Qwen3-Next-80B-A3B-Instruct', 'Qwen3 80B Instruct', 'S', '65.0%', '262k'),
    ('Qwen/Qwen2.5-Coder-32B-Instruct', 'Qwen2.5 Coder 32B', 'A', '46.0%', '32k'),
    ('Qwen/QwQ-32B', 'QwQ 32B', 'A+', '50.0%', '131k'),
    ('meta-llama/Meta-Llama-3.1-70B-Instruct', 'Llama 3.1 70B', 'A-', '39.5%', '131k'),
    ('meta-llama/Meta-Llama-3.1-8B-Instruct', 'Llama 3.1 8B', 'B', '28.8%', '131k'),
    ('meta-llama/Llama-3.2-3B-Instruct', 'Llama 3.2 3B', 'B-', '20.0%', '131k'),
]

# 顺序即目录中的排名顺序
SOURCES: Dict[str, List[ModelRow]] = {
    'nvidia': NVIDIA_MODELS,
    'groq': GROQ_MODELS,
    'cerebras': CEREBRAS_MODELS,
    'sambanova': SAMBANOVA_MODELS,
    'openrouter': OPENROUTER_MODELS,
    'codestral': CODESTRAL_MODELS,
    'googleai': GOOGLEAI_MODELS,
    'mistral': MISTRAL_MODELS,
    'fireworks': FIREWORKS_MODELS,
    'hyperbolic': HYPERBOLIC_MODELS,
}
