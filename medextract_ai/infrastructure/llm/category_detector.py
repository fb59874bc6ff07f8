"""문서 카테고리 감지기 - OpenAI Vision.

문서 첫 페이지를 분석하여 등록된 카테고리 중 하나로 분류합니다.
"""

import logging

from openai import AsyncOpenAI

from medextract_ai.core.config.settings import settings
from medextract_ai.domain.medical.models import CategoryDetection, Document
from medextract_ai.infrastructure.document.renderer import (
    DocumentRenderer,
    DocumentRenderError,
)
from medextract_ai.infrastructure.llm.json_response import extract_json_object

logger = logging.getLogger(__name__)


class CategoryDetectionError(Exception):
    """카테고리 감지 오류."""

    pass


class OpenAICategoryDetector:
    """OpenAI Vision 기반 문서 카테고리 감지기."""

    PROMPT_TEMPLATE = """
Examine la première page de ce document médical et détermine à quelle catégorie
il appartient parmi la liste suivante : {categories}.

Réponds uniquement avec un objet JSON :
{{
  "category": "nom exact de la catégorie",
  "no_category": false
}}

Si aucune catégorie ne correspond :
{{
  "category": "",
  "no_category": true
}}
""".strip()

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        renderer: DocumentRenderer | None = None,
        model: str | None = None,
    ) -> None:
        """감지기를 초기화합니다.

        Args:
            client: OpenAI 비동기 클라이언트. None이면 설정값으로 생성.
            renderer: 문서 렌더러. None이면 설정값으로 생성.
            model: Vision 모델명. None이면 설정에서 가져옴.
        """
        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        self.renderer = renderer or DocumentRenderer.from_settings()
        self.model = model or settings.openai_model
        self.temperature = settings.detection_temperature

    async def detect_category(
        self, document: Document, categories: list[str]
    ) -> CategoryDetection:
        """문서 첫 페이지로 카테고리를 감지합니다.

        Args:
            document: 업로드된 문서
            categories: 후보 카테고리명 목록

        Returns:
            감지 결과 (해당 없음이면 no_category=True)

        Raises:
            CategoryDetectionError: 렌더링 실패 또는 응답을 파싱할 수 없는 경우
        """
        try:
            first_page = await self.renderer.render_first_page(document)
        except DocumentRenderError as e:
            raise CategoryDetectionError(str(e)) from e

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": self.build_prompt(categories)},
                        {
                            "type": "image_url",
                            "image_url": {"url": first_page.data_url},
                        },
                    ],
                }
            ],
            temperature=self.temperature,
            max_tokens=200,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content
        if not content:
            raise CategoryDetectionError("OpenAI 응답이 비어있습니다")

        logger.debug(f"카테고리 감지 원본 응답: {content}")

        try:
            data = extract_json_object(content)
        except ValueError as e:
            raise CategoryDetectionError(f"카테고리 감지 응답 파싱 실패: {e}") from e

        return CategoryDetection(
            category=str(data.get("category") or "").strip(),
            no_category=data.get("no_category") is True,
        )

    def build_prompt(self, categories: list[str]) -> str:
        """후보 카테고리를 포함한 감지 프롬프트를 생성합니다."""
        return self.PROMPT_TEMPLATE.format(categories=", ".join(categories))
