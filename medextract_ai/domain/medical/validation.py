"""추출 결과 필수 항목 검증."""

from medextract_ai.domain.medical.models import ExtractedFields, ValidationResult

# 필수 항목 (검증 순서 = 누락 목록 순서)
REQUIRED_FIELDS: tuple[str, ...] = (
    "patient_first_name",
    "patient_last_name",
    "patient_gender",
    "patient_birthdate",
    "examination_date",
    "examination_type",
)


def validate_extracted_fields(fields: ExtractedFields) -> ValidationResult:
    """필수 항목이 모두 채워졌는지 확인합니다.

    값의 존재 여부만 확인하며 형식/길이 검증은 하지 않습니다.
    누락 항목은 camelCase 이름(예: ``patientGender``)으로 보고합니다.

    Args:
        fields: AI 추출 결과

    Returns:
        검증 결과 (누락 항목은 필수 항목 순서 유지)
    """
    missing_fields = [
        ExtractedFields.model_fields[name].alias or name
        for name in REQUIRED_FIELDS
        if not getattr(fields, name)
    ]

    return ValidationResult(
        is_valid=not missing_fields,
        missing_fields=missing_fields,
    )
