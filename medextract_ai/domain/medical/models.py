"""의료 문서 처리 도메인 모델.

스캔된 의료 문서, AI 추출 결과, 참조 데이터(검사 유형/문서 카테고리)와
처리 결과를 정의합니다.
"""

from dataclasses import dataclass
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# 업로드 경계에서 허용하는 MIME 타입
PDF_MIME_TYPE = "application/pdf"
DOC_MIME_TYPE = "application/msword"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
JPEG_MIME_TYPE = "image/jpeg"
PNG_MIME_TYPE = "image/png"

SUPPORTED_MIME_TYPES = frozenset(
    {PDF_MIME_TYPE, DOC_MIME_TYPE, DOCX_MIME_TYPE, JPEG_MIME_TYPE, PNG_MIME_TYPE}
)

FILE_EXTENSIONS = {
    PDF_MIME_TYPE: ".pdf",
    DOC_MIME_TYPE: ".doc",
    DOCX_MIME_TYPE: ".docx",
    JPEG_MIME_TYPE: ".jpg",
    PNG_MIME_TYPE: ".png",
}


@dataclass(frozen=True)
class Document:
    """업로드된 스캔 문서.

    요청 단위로 생성되며 처리 완료 후 폐기됩니다.
    """

    id: str
    content: bytes
    mime_type: str

    @property
    def filename(self) -> str:
        """첨부 파일명 (문서 ID + 확장자)."""
        return f"{self.id}{FILE_EXTENSIONS.get(self.mime_type, '')}"

    def __repr__(self) -> str:
        """문자열 표현을 반환합니다 (본문 제외)."""
        return f"<Document id={self.id} mime_type={self.mime_type} size={len(self.content)}>"


class ExtractedFields(BaseModel):
    """AI가 문서에서 추출한 환자/검사 정보.

    값이 없으면 빈 문자열로 표현하며, 키가 누락되지 않습니다.
    날짜/성별 형식은 프롬프트 지시 이상의 보장이 없습니다.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    patient_first_name: str = Field(default="", description="환자 이름")
    patient_last_name: str = Field(default="", description="환자 성")
    patient_gender: str = Field(default="", description="환자 성별 (M/F)")
    patient_birthdate: str = Field(default="", description="생년월일 (DD/MM/YYYY)")
    examination_date: str = Field(default="", description="검사일 (DD/MM/YYYY)")
    examination_type: str = Field(default="", description="검사 유형 원문 라벨")

    def to_report(self) -> dict[str, str]:
        """알림 메일용 camelCase 딕셔너리로 변환합니다."""
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class ValidationResult:
    """필수 항목 검증 결과."""

    is_valid: bool
    missing_fields: list[str]


@dataclass(frozen=True)
class ExaminationType:
    """표준 검사 유형 (참조 데이터, 읽기 전용)."""

    id: int
    name: str
    code: str
    coordonance: str | None = None


@dataclass(frozen=True)
class DocumentCategory:
    """문서 카테고리와 카테고리별 추출 프롬프트."""

    id: int
    name: str
    prompt: str


@dataclass(frozen=True)
class CategoryDetection:
    """카테고리 감지 결과."""

    category: str
    no_category: bool


@dataclass(frozen=True)
class NotificationAttachment:
    """알림 메일 첨부 파일."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class ProcessingStatus(IntEnum):
    """문서 처리 상태 코드."""

    RESOLVED = 1  # 검사 유형까지 확인 완료
    INCOMPLETE = 2  # 필수 항목 누락 또는 검사 유형 미확인


class ProcessingOutcome(ExtractedFields):
    """문서 처리 결과 (MedicalInfo).

    - RESOLVED: 추출 항목 + 표준 검사 유형명(folder_name)
    - INCOMPLETE + missing_information 있음: 필수 항목 누락
    - INCOMPLETE + missing_information 없음: 검사 유형 미확인
    """

    folder_name: str = Field(default="", description="표준 검사 유형명 (분류 폴더)")
    status: ProcessingStatus = Field(description="처리 상태 코드")
    missing_information: list[str] = Field(
        default_factory=list, description="누락된 필수 항목 목록"
    )
    used_category: str | None = Field(default=None, description="추출에 사용된 카테고리")

    @model_validator(mode="after")
    def _check_folder_name(self) -> "ProcessingOutcome":
        if self.status == ProcessingStatus.RESOLVED and not self.folder_name:
            raise ValueError("RESOLVED 결과에는 folder_name이 필요합니다")
        if self.status == ProcessingStatus.INCOMPLETE and self.folder_name:
            raise ValueError("INCOMPLETE 결과의 folder_name은 비어 있어야 합니다")
        return self

    @classmethod
    def resolved(
        cls,
        fields: ExtractedFields,
        folder_name: str,
        used_category: str | None = None,
    ) -> "ProcessingOutcome":
        """검사 유형이 확인된 결과를 생성합니다."""
        return cls(
            **fields.model_dump(),
            folder_name=folder_name,
            status=ProcessingStatus.RESOLVED,
            used_category=used_category,
        )

    @classmethod
    def incomplete(
        cls,
        fields: ExtractedFields,
        missing_information: list[str] | None = None,
        used_category: str | None = None,
    ) -> "ProcessingOutcome":
        """필수 항목 누락 또는 검사 유형 미확인 결과를 생성합니다."""
        return cls(
            **fields.model_dump(),
            status=ProcessingStatus.INCOMPLETE,
            missing_information=list(missing_information or []),
            used_category=used_category,
        )
