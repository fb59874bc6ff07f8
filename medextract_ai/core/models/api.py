"""API 요청/응답 모델 (DTO)."""

from pydantic import BaseModel, Field

from medextract_ai.domain.medical.models import ProcessingOutcome


class ProcessDocumentResponseDTO(BaseModel):
    """문서 처리 응답 DTO.

    처리 상태(1: 확인 완료, 2: 정보 부족)와 추출 결과를 반환합니다.
    """

    success: bool = Field(default=True, description="요청 처리 여부")
    data: ProcessingOutcome = Field(description="문서 처리 결과")

    class Config:
        """Pydantic 설정."""

        json_schema_extra = {
            "example": {
                "success": True,
                "data": {
                    "patientFirstName": "Jean",
                    "patientLastName": "Dupont",
                    "patientGender": "M",
                    "patientBirthdate": "15/03/1985",
                    "examinationDate": "20/12/2024",
                    "examinationType": "Radiographie Thorax",
                    "folderName": "Imagerie Thoracique",
                    "status": 1,
                    "missingInformation": [],
                    "usedCategory": None,
                },
            }
        }


class ErrorResponse(BaseModel):
    """처리 실패 응답 모델."""

    error: str = Field(description="오류 유형")
    message: str = Field(default="", description="오류 상세")


class HealthCheckResponse(BaseModel):
    """헬스 체크 응답 모델.

    서비스 상태 확인 API의 응답 형식을 정의합니다.
    """

    status: str = Field(default="healthy", description="서비스 상태")
    version: str = Field(description="애플리케이션 버전")
    service: str = Field(description="서비스 이름")
    database: str = Field(description="참조 데이터베이스 연결 상태")
