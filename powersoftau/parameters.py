"""
세레모니 파라미터
==================

SRS 벡터의 길이를 결정하는 설정값. 세레모니가 시작되면 바뀌지 않는다.

  Parameters = {
      num_g1_elements_needed: G1 거듭제곱 개수 (≥ 1)
      num_g2_elements_needed: G2 거듭제곱 개수 (≥ 2)
  }

KZG 커밋먼트에는 G2 원소 2개 [G2, τ·G2]면 충분하다.
여러 서브 세레모니를 동시에 진행하는 경우 CEREMONIES 프리셋을 사용한다.

사용 예시:
    >>> params = Parameters(num_g1_elements_needed=4, num_g2_elements_needed=2)
    >>> Parameters.for_kzg(16).num_g2
    2
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# KZG 기반 스킴에 필요한 G2 원소 수: [G2, τ·G2]
NUM_G2_ELEMENTS_FOR_KZG = 2


class Parameters:
    """SRS 크기 파라미터 (불변).

    속성:
        num_g1_elements_needed: G1 원소 수
        num_g2_elements_needed: G2 원소 수
    """

    __slots__ = ("_num_g1", "_num_g2")

    def __init__(self, num_g1_elements_needed, num_g2_elements_needed):
        for name, value, minimum in (
            ("num_g1_elements_needed", num_g1_elements_needed, 1),
            ("num_g2_elements_needed", num_g2_elements_needed, 2),
        ):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name}는 정수여야 합니다: {value!r}")
            if value < minimum:
                raise ValueError(f"{name}는 {minimum} 이상이어야 합니다: {value}")
        # τ·G1이 없으면 τ^2·G2 이상의 G2 원소를 τ에 묶어 검증할 수 없다
        if num_g1_elements_needed == 1 and num_g2_elements_needed > 2:
            raise ValueError("G1 원소가 1개이면 G2 원소는 2개여야 합니다")
        object.__setattr__(self, "_num_g1", num_g1_elements_needed)
        object.__setattr__(self, "_num_g2", num_g2_elements_needed)

    def __setattr__(self, name, value):
        raise AttributeError("Parameters는 변경할 수 없습니다")

    @property
    def num_g1_elements_needed(self):
        return self._num_g1

    @property
    def num_g2_elements_needed(self):
        return self._num_g2

    # 짧은 별칭
    num_g1 = num_g1_elements_needed
    num_g2 = num_g2_elements_needed

    @classmethod
    def for_kzg(cls, num_coefficients):
        """KZG용 파라미터를 만든다.

        가장 높은 차수의 다항식이 가진 계수 개수를 입력한다.
        예: 2차 다항식 a + bx + cx² → num_coefficients = 3
        """
        return cls(num_coefficients, NUM_G2_ELEMENTS_FOR_KZG)

    def to_dict(self):
        return {
            "num_g1_elements_needed": self._num_g1,
            "num_g2_elements_needed": self._num_g2,
        }

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(data["num_g1_elements_needed"], data["num_g2_elements_needed"])
        except (KeyError, TypeError) as exc:
            raise ValueError(f"파라미터 형식이 잘못되었습니다: {data!r}") from exc

    def __eq__(self, other):
        if not isinstance(other, Parameters):
            return NotImplemented
        return self._num_g1 == other._num_g1 and self._num_g2 == other._num_g2

    def __hash__(self):
        return hash((self._num_g1, self._num_g2))

    def __repr__(self):
        return f"Parameters(num_g1={self._num_g1}, num_g2={self._num_g2})"


# 이더리움 KZG 세레모니의 4개 서브 세레모니
CEREMONIES = (
    Parameters(4096, 65),
    Parameters(8192, 65),
    Parameters(16384, 65),
    Parameters(32768, 65),
)


def load_parameters(path):
    """JSON 파일에서 파라미터를 읽는다.

    파일은 객체 하나 또는 객체의 리스트를 담을 수 있다.

        {"num_g1_elements_needed": 4096, "num_g2_elements_needed": 65}

    Args:
        path: JSON 파일 경로

    Returns:
        Parameters 또는 list[Parameters]

    Raises:
        ValueError: 형식이 잘못되었을 때
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}: JSON 형식이 아닙니다") from exc

    if isinstance(data, list):
        params = [Parameters.from_dict(item) for item in data]
    else:
        params = Parameters.from_dict(data)
    logger.debug("loaded ceremony parameters from %s: %r", path, params)
    return params
