# stockmeta/services/analyzer.py
import logging
from typing import Optional, Sequence

from stockmeta.core.errors import ConfigurationError
from stockmeta.ml.categories import DEFAULT_RULES, CategoryRule, classify
from stockmeta.schemas.metadata import MetadataRecord
from stockmeta.services.images import prepare_image
from stockmeta.services.normalizer import NormalizationPolicy, normalize
from stockmeta.services.prompt import build_prompt
from stockmeta.services.vision_client import MetadataGenerator

logger = logging.getLogger(__name__)


class MetadataAnalyzer:
    """單次請求的處理流程：前置檢查 → prompt → 模型 → 正規化 → （可選）分類覆寫"""

    def __init__(
        self,
        generator: Optional[MetadataGenerator],
        policy: NormalizationPolicy = NormalizationPolicy(),
        max_image_chars: int = 12 * 1024 * 1024,
        override_category: bool = True,
        rules: Sequence[CategoryRule] = DEFAULT_RULES,
    ) -> None:
        self.generator = generator
        self.policy = policy
        self.max_image_chars = max_image_chars
        self.override_category = override_category
        self.rules = rules

    async def analyze(self, image_base64: Optional[str], filename: Optional[str] = None) -> MetadataRecord:
        image = prepare_image(image_base64, self.max_image_chars)

        if self.generator is None:
            raise ConfigurationError("Missing OPENAI_API_KEY on server")

        logger.info("Analyzing image filename=%s mime=%s size=%d", filename or "unknown", image.mime, image.size)

        prompt = build_prompt(filename, self.policy)
        raw = await self.generator.generate(prompt, image.data_uri)
        record = normalize(raw, self.policy)

        if self.override_category:
            final = classify(
                record.title,
                record.keywords,
                record.category,
                rules=self.rules,
                fallback=self.policy.category_fallback,
            )
            if final != record.category:
                logger.info("Category override: model=%d final=%d", record.category, final)
                record = record.model_copy(update={"category": final})

        return record
