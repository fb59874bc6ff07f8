"""테스트 공통 설정."""

import os

# settings 모듈 import 전에 필수 환경 변수를 채움
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("NOTIFICATION_CHANNEL", "log")
