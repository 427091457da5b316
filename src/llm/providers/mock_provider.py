from __future__ import annotations

import json

from llm.providers.base import TextProvider


class MockProvider(TextProvider):
    provider_id = "mock"
    display_name = "Mock"

    def __init__(self, model: str = "mock"):
        super().__init__(model)

    def generate_text(self, prompt: str) -> str:
        """
        Returns a canned, fenced JSON reply shaped like a real model answer.
        """
        lower = prompt.lower()
        category = "工作"
        if "打扫" in prompt or "买菜" in prompt or "shop" in lower:
            category = "生活"
        elif "跑步" in prompt or "gym" in lower or "run" in lower:
            category = "健康"
        elif "学习" in prompt or "read" in lower or "study" in lower:
            category = "学习"

        body = json.dumps({
            "tasks": [
                {
                    "title": "整理想法",
                    "category": category,
                    "estimatedTime": 30,
                    "subtasks": [
                        {"title": "列出要点", "completed": False},
                        {"title": "确定第一步", "completed": False},
                    ],
                }
            ]
        }, ensure_ascii=False)
        return f"```json\n{body}\n```"
