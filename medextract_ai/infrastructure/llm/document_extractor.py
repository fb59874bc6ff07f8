"""의료 문서 정보 추출기 - OpenAI Vision.

스캔된 의료 문서 페이지 이미지를 GPT Vision에 전달하여
환자/검사 정보 6개 항목을 JSON으로 추출합니다.
"""

import logging
from typing import Any

from openai import AsyncOpenAI

from medextract_ai.core.config.settings import settings
from medextract_ai.domain.medical.models import Document, ExtractedFields
from medextract_ai.infrastructure.document.renderer import (
    DocumentRenderer,
    DocumentRenderError,
)
from medextract_ai.infrastructure.llm.json_response import extract_json_object
from medextract_ai.infrastructure.pdf.image_converter import PageImage

logger = logging.getLogger(__name__)


class DocumentExtractionError(Exception):
    """문서 정보 추출 오류 (응답 파싱 불가 등)."""

    pass


# 카테고리 프롬프트 뒤에 항상 붙는 출력 형식/검증 규칙 (문서가 프랑스어이므로 프랑스어로 작성)
OUTPUT_FORMAT_SECTION = """
## Format de sortie JSON
{
    "patientFirstName": "Jean",
    "patientLastName": "Dupont",
    "patientGender": "M",
    "patientBirthdate": "15/03/1985",
    "examinationDate": "20/12/2024",
    "examinationType": "Analyses Sanguines"
}

## Valeurs manquantes
- Toute information introuvable (nom, date, sexe...) doit valoir ""
- Ne jamais inventer une valeur absente du document

## Ordre de recherche
1. Le texte clairement formaté et lisible
2. L'en-tête du document
3. Le corps du document pour les informations restantes
4. La cohérence entre le type de document et la spécialité médicale

## Contrôles
1. Dates au format DD/MM/YYYY et plausibles
2. Sexe égal à "M" ou "F" uniquement
3. Réponds uniquement avec l'objet JSON
""".strip()

DEFAULT_EXTRACTION_PROMPT = f"""
Prends le temps d'analyser le document avant de répondre.

## Objectif
Tu reçois les pages d'un document médical scanné. Extrais les informations
ci-dessous et retourne-les sous forme d'objet JSON.

## Champs attendus
- patientFirstName : prénom du patient
- patientLastName : nom de famille du patient
- patientGender : sexe du patient (M ou F)
- patientBirthdate : date de naissance (DD/MM/YYYY)
- examinationDate : date de l'examen (DD/MM/YYYY)
- examinationType : intitulé du type d'examen

## Type d'examen
- "Résultats de biologie" doit être rendu par "Analyses Sanguines"
- Dans les autres cas, recopier l'intitulé tel qu'il apparaît
- L'intitulé se trouve généralement centré en haut de la première page

## Indices de localisation
- Dates : "Date de naissance", "Né(e) le", "Date d'examen", "Examen du"
- Sexe : "Homme"/"Femme", "H"/"F", "M."/"Mme"

{OUTPUT_FORMAT_SECTION}
""".strip()


class OpenAIDocumentExtractor:
    """OpenAI Vision 기반 의료 문서 정보 추출기.

    카테고리별 프롬프트가 주어지면 해당 프롬프트에 출력 형식 규칙을 덧붙여 사용하고,
    없으면 기본 추출 프롬프트를 사용합니다.
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        renderer: DocumentRenderer | None = None,
        model: str | None = None,
        max_pages: int | None = None,
    ) -> None:
        """추출기를 초기화합니다.

        Args:
            client: OpenAI 비동기 클라이언트. None이면 설정값으로 생성.
            renderer: 문서 렌더러. None이면 설정값으로 생성.
            model: Vision 모델명. None이면 설정에서 가져옴.
            max_pages: 전송할 최대 페이지 수. None이면 설정에서 가져옴.
        """
        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        self.renderer = renderer or DocumentRenderer.from_settings()
        self.model = model or settings.openai_model
        self.max_pages = max_pages or settings.max_pages
        self.temperature = settings.extraction_temperature
        self.max_tokens = settings.openai_max_tokens

    async def extract(
        self, document: Document, custom_prompt: str | None = None
    ) -> ExtractedFields:
        """문서에서 환자/검사 정보를 추출합니다.

        Args:
            document: 업로드된 문서
            custom_prompt: 카테고리별 지시 프롬프트 (없으면 기본 프롬프트)

        Returns:
            추출 항목 (없는 값은 빈 문자열)

        Raises:
            DocumentExtractionError: 렌더링 실패 또는 응답을 파싱할 수 없는 경우
        """
        try:
            pages = await self.renderer.render(document, max_pages=self.max_pages)
        except DocumentRenderError as e:
            raise DocumentExtractionError(str(e)) from e

        prompt = self.build_prompt(custom_prompt)

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        *self._image_parts(pages),
                    ],
                }
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content
        if not content:
            raise DocumentExtractionError("OpenAI 응답이 비어있습니다")

        logger.debug(f"추출 원본 응답: {content}")

        try:
            data = extract_json_object(content)
        except ValueError as e:
            raise DocumentExtractionError(f"추출 응답 파싱 실패: {e}") from e

        fields = self._parse_fields(data)
        logger.info(
            "문서 정보 추출 완료",
            extra={
                "document_id": document.id,
                "pages": len(pages),
                "custom_prompt": custom_prompt is not None,
            },
        )
        return fields

    @staticmethod
    def build_prompt(custom_prompt: str | None) -> str:
        """추출 프롬프트를 생성합니다."""
        if not custom_prompt:
            return DEFAULT_EXTRACTION_PROMPT
        return f"{custom_prompt.strip()}\n\n{OUTPUT_FORMAT_SECTION}"

    def _image_parts(self, pages: list[PageImage]) -> list[dict[str, Any]]:
        return [
            {
                "type": "image_url",
                "image_url": {"url": page.data_url, "detail": "high"},
            }
            for page in pages
        ]

    def _parse_fields(self, data: dict[str, Any]) -> ExtractedFields:
        """응답 JSON을 추출 항목으로 변환합니다.

        누락되었거나 null인 값은 빈 문자열로 채웁니다.
        """
        values = {
            alias: self._to_text(data.get(alias))
            for alias in (
                field.alias for field in ExtractedFields.model_fields.values()
            )
        }
        # 여러 줄로 인식된 검사 유형 라벨은 한 줄로 합침
        values["examinationType"] = values["examinationType"].replace("\n", " ")
        return ExtractedFields.model_validate(values)

    @staticmethod
    def _to_text(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()
