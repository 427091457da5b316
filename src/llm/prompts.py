from __future__ import annotations

from mindstream.models import TASK_CATEGORIES

SYSTEM_PROMPT = "你是一个专业的任务管理助手，擅长将用户的想法转换为结构化的任务列表。"

TEMPERATURE = 0.7
MAX_TOKENS = 1500

_STRUCTURING_TEMPLATE = """
用户输入: "{text}"

请将用户的输入文本转换为结构化的任务列表。按照以下JSON格式返回结构化数据，只返回JSON，不要其他内容：

{{
  "tasks": [
    {{
      "title": "任务标题",
      "category": "{categories}",
      "estimatedTime": 30,
      "subtasks": [
        {{
          "title": "子任务标题",
          "completed": false
        }}
      ]
    }}
  ]
}}

规则：
1. 从文本中识别出所有可能的任务
2. 为每个任务分配合适的分类
3. 估算每个任务的时间（分钟）
4. 将复杂任务拆分为2-5个子任务
5. 简单任务可以只有1个子任务
6. 任务标题要简洁明确
7. 子任务要具体可执行
8. 时间估算要合理（15-120分钟）
"""


def build_structuring_prompt(text: str) -> str:
    return _STRUCTURING_TEMPLATE.format(text=text, categories="|".join(TASK_CATEGORIES))


def with_system_prefix(prompt: str) -> str:
    """For providers without a separate system role."""
    return f"{SYSTEM_PROMPT}\n\n{prompt}"
