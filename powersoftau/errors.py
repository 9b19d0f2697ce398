"""
Powers of Tau 예외 정의
========================

구조적 오류(잘못된 인코딩, 잘못된 점, 잘못된 기여)만 예외로 표현한다.
업데이트/세레모니 검증 실패는 예외가 아니라 VerificationResult 값으로 반환된다
(powersoftau.verifier 참고).
"""


class PowersOfTauError(ValueError):
    """이 패키지의 모든 오류의 기반 클래스."""


class DeserializationError(PowersOfTauError):
    """바이트 길이, hex 문자열 또는 점 인코딩이 잘못되었을 때."""


class InvalidPointError(PowersOfTauError):
    """항등원, 곡선 밖의 점, 부분군 밖의 점, 또는 바뀐 생성자.

    속성:
        group: "G1" 또는 "G2"
        index: SRS 내 위치 (공개키 등 SRS 밖의 점이면 None)
    """

    def __init__(self, group, index, reason):
        self.group = group
        self.index = index
        self.reason = reason
        if index is None:
            super().__init__(f"{group} 점이 유효하지 않습니다: {reason}")
        else:
            super().__init__(f"{group}[{index}] 점이 유효하지 않습니다: {reason}")


class InvalidContributionError(PowersOfTauError):
    """0 비밀 값이나 이미 사용된 개인키로 업데이트하려 할 때."""
