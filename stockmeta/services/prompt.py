# stockmeta/services/prompt.py
from typing import Optional

from stockmeta.ml.categories import CATEGORIES
from stockmeta.services.normalizer import NormalizationPolicy


def _category_lines() -> str:
    return "\n".join(f"  {code} {name}" for code, name in CATEGORIES.items())


def build_prompt(filename: Optional[str], policy: NormalizationPolicy) -> str:
    """組出給 vision 模型的 Adobe Stock 提示詞；檔名只當作提示。"""
    name = (filename or "").strip() or "unknown"
    min_keywords = min(30, policy.keywords_max)
    return f"""
You are an expert Adobe Stock contributor assistant.

Look at the image and create metadata for Adobe Stock CSV:
- "title": short, natural English title, max {policy.title_max_length} characters, no hashtags, no quotes, no emojis.
- "keywords": {min_keywords}–{policy.keywords_max} keywords in English, array of strings, most important first, no duplicates, no emojis.
- "category": integer 1–21 according to Adobe Stock categories:
{_category_lines()}

Return ONLY valid JSON, nothing else.
JSON shape:

{{
  "title": "string",
  "keywords": ["string", "..."],
  "category": 1
}}

If the filename gives useful hints, you can use it too.
Filename: {name}
""".strip()
