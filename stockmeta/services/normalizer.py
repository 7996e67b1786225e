# stockmeta/services/normalizer.py
"""
模型回應正規化：
- 從模型的自由文字中取出 JSON 物件（lenient：第一個 "{" 到最後一個 "}"；strict：整段 parse）
- title / keywords / category 三個欄位各自降級，不會因單一欄位壞掉而整筆失敗
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Literal

from stockmeta.core.errors import EmptyResponse, MalformedResponse, NoJsonObjectFound
from stockmeta.ml.categories import DEFAULT_FALLBACK, coerce_category
from stockmeta.schemas.metadata import MetadataRecord

DEFAULT_TITLE_FALLBACK = "ai generated image"


@dataclass(frozen=True)
class NormalizationPolicy:
    extraction: Literal["lenient", "strict"] = "lenient"
    title_max_length: int = 200
    title_truncation: Literal["word", "hard"] = "word"
    title_min_word_cut: int = 40
    title_fallback: str = DEFAULT_TITLE_FALLBACK
    keywords_max: int = 49
    category_fallback: int = DEFAULT_FALLBACK

    @classmethod
    def from_settings(cls, s) -> "NormalizationPolicy":
        return cls(
            extraction=s.EXTRACTION_MODE,
            title_max_length=s.TITLE_MAX_LENGTH,
            title_truncation=s.TITLE_TRUNCATION,
            title_min_word_cut=s.TITLE_MIN_WORD_CUT,
            title_fallback=s.TITLE_FALLBACK,
            keywords_max=s.KEYWORDS_MAX,
            category_fallback=s.CATEGORY_FALLBACK,
        )


# ===========================================
# JSON 擷取
# ===========================================
def extract_json_object(text: str, mode: str = "lenient") -> Dict[str, Any]:
    if mode == "strict":
        candidate = text
    else:
        start = text.find("{")
        end = text.rfind("}")
        if start < 0 or end <= start:
            raise NoJsonObjectFound("No JSON object found in model output")
        candidate = text[start:end + 1]

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Failed to parse JSON from model output: {e.msg}") from e
    except RecursionError as e:
        # 巢狀過深的輸出
        raise MalformedResponse("Model output JSON is nested too deeply") from e

    if not isinstance(data, dict):
        raise MalformedResponse("Model output JSON is not an object")
    return data


# ===========================================
# 欄位正規化
# ===========================================
def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    return ""


def truncate_title(title: str, max_length: int, mode: str = "word", min_word_cut: int = 40) -> str:
    if len(title) <= max_length:
        return title

    cut = title[:max_length]
    if mode == "word" and title[max_length] != " ":
        # 往回找最近的空白；太前面就寧可硬切
        idx = cut.rfind(" ")
        if idx > min_word_cut:
            cut = cut[:idx]
    return cut.rstrip()


def normalize_title(value: Any, policy: NormalizationPolicy) -> str:
    title = _as_text(value).strip() or policy.title_fallback
    return truncate_title(
        title,
        policy.title_max_length,
        mode=policy.title_truncation,
        min_word_cut=policy.title_min_word_cut,
    )


def normalize_keywords(value: Any, max_count: int) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []

    seen = set()
    out: List[str] = []
    for item in value:
        if item is None or isinstance(item, (dict, list, tuple)):
            continue
        kw = str(item).lower().strip()
        if not kw or kw in seen:
            continue
        seen.add(kw)
        out.append(kw)
        if len(out) >= max_count:
            break
    return out


def normalize(raw_text: str, policy: NormalizationPolicy = NormalizationPolicy()) -> MetadataRecord:
    """
    主要入口：模型原始文字 → MetadataRecord。
      - 空字串 → EmptyResponse
      - 找不到 / 解析不了 JSON 物件 → NoJsonObjectFound / MalformedResponse
      - 其餘情況一律回傳合法紀錄（各欄位有 fallback）
    """
    text = (raw_text or "").strip()
    if not text:
        raise EmptyResponse("Empty response from model")

    data = extract_json_object(text, policy.extraction)

    return MetadataRecord(
        title=normalize_title(data.get("title"), policy),
        keywords=normalize_keywords(data.get("keywords"), policy.keywords_max),
        category=coerce_category(data.get("category"), policy.category_fallback),
    )
