"""
Powers of Tau Structured Reference String (SRS)
=================================================

여러 참여자가 차례로 갱신하는 구조화 참조 문자열.

**SRS란?**
  비밀 값 τ의 거듭제곱을 곡선 점으로 인코딩한 공개 파라미터이다.
  τ는 모든 기여자 비밀 값의 곱이며, 누구도 전체 값을 알지 못한다.

  SRS = {
      g1_elements: [G1, τ·G1, τ²·G1, ..., τ^(n-1)·G1]
      g2_elements: [G2, τ·G2, ..., τ^(m-1)·G2]
  }

**불변 조건**:
  - g1_elements[0] == G1, g2_elements[0] == G2 (어떤 기여로도 바뀌지 않음)
  - 항등원이 없어야 함
  - 모든 점은 소수 위수 부분군에 속해야 함

**생애주기**:
  세레모니 시작 시 τ = 1 (모든 원소가 생성자)로 만들어지고,
  기여마다 powersoftau.update.update 가 새 SRS 값을 만들어 낸다.
  SRS 객체 자체는 불변(tuple)이며 부분적으로 수정되지 않는다.

사용 예시:
    >>> srs = SRS.genesis(Parameters(num_g1_elements_needed=4, num_g2_elements_needed=2))
    >>> srs.g1_elements[1] == G1   # τ = 1
    >>> srs.subgroup_check()       # True
"""

import logging

from powersoftau.errors import InvalidPointError
from powersoftau.field import (
    FR, G1, G2,
    ec_mul, ec_add, ec_eq, is_identity, is_on_curve_g1, is_on_curve_g2,
    in_subgroup, pairings_equal, random_scalar,
)
from powersoftau.parameters import Parameters

logger = logging.getLogger(__name__)


class SRS:
    """Structured Reference String: τ의 거듭제곱 점 벡터 쌍.

    속성:
        g1_elements: tuple, [τ^i·G1 for i in range(num_g1)]
        g2_elements: tuple, [τ^i·G2 for i in range(num_g2)]
    """

    __slots__ = ("g1_elements", "g2_elements")

    def __init__(self, g1_elements, g2_elements):
        self.g1_elements = tuple(g1_elements)
        self.g2_elements = tuple(g2_elements)

    @classmethod
    def genesis(cls, parameters):
        """τ = 1 인 시작 SRS를 만든다 (모든 원소가 생성자).

        Args:
            parameters: Parameters

        Returns:
            SRS
        """
        return cls(
            [G1] * parameters.num_g1_elements_needed,
            [G2] * parameters.num_g2_elements_needed,
        )

    @classmethod
    def for_kzg(cls, num_coefficients):
        """KZG 커밋먼트용 시작 SRS (G2 원소 2개)."""
        return cls.genesis(Parameters.for_kzg(num_coefficients))

    @property
    def num_g1(self):
        return len(self.g1_elements)

    @property
    def num_g2(self):
        return len(self.g2_elements)

    @property
    def parameters(self):
        return Parameters(self.num_g1, self.num_g2)

    def matches(self, parameters):
        """벡터 길이가 파라미터와 일치하는지 확인한다."""
        return (
            self.num_g1 == parameters.num_g1_elements_needed
            and self.num_g2 == parameters.num_g2_elements_needed
        )

    # ─────────────────────────────────────────────────────────────
    # 검증
    # ─────────────────────────────────────────────────────────────

    def validate(self):
        """외부에서 받은 SRS를 신뢰하기 전에 모든 점을 검사한다.

        검사 항목:
          - 0번 원소는 정규 생성자 G1 / G2
          - 나머지 원소는 곡선 위의 점, 항등원 아님, 소수 위수 부분군 소속

        곡선 밖의 점(invalid-curve)이나 부분군 밖의 점(small-subgroup)을
        받아들이면 다음 기여자의 비밀 비트가 누출될 수 있다.

        Raises:
            InvalidPointError: 처음 발견된 잘못된 점의 그룹과 인덱스와 함께
        """
        if self.num_g1 < 1 or self.num_g2 < 2:
            raise InvalidPointError(
                "G1" if self.num_g1 < 1 else "G2", None,
                f"원소 수가 부족합니다 (g1={self.num_g1}, g2={self.num_g2})",
            )
        _validate_elements("G1", self.g1_elements, G1, is_on_curve_g1)
        _validate_elements("G2", self.g2_elements, G2, is_on_curve_g2)

    def subgroup_check(self):
        """validate()를 다시 수행하고 결과를 bool로 반환한다.

        코디네이터는 정직하다고 가정될 뿐 증명되지 않았으므로,
        기여자는 받은 SRS를 갱신하기 전에 이 검사를 수행한다.
        """
        try:
            self.validate()
        except InvalidPointError as exc:
            logger.warning("SRS subgroup check failed: %s", exc)
            return False
        return True

    def structure_check(self, randomness=None):
        """G1, G2 원소가 하나의 τ에 대한 등비수열인지 페어링으로 확인한다.

        연속한 모든 쌍에 대해:
            G1: e(τ^(i+1)·G1, G2) == e(τ^i·G1, τ·G2)
            G2: e(G1, τ^(i+1)·G2) == e(τ·G1, τ^i·G2)

        쌍마다 페어링을 두 번 계산하는 대신, 랜덤 ρ로 선형결합하여
        각 그룹당 페어링 방정식 하나로 검사한다:
            e(Σ ρ^i·g1[i+1], g2[0]) == e(Σ ρ^i·g1[i], g2[1])
        어느 한 쌍이라도 틀리면 결합식은 확률 ≈ n/r 이하로만 성립한다.

        Args:
            randomness: 0이 아닌 결합 계수 ρ (None이면 새로 생성)

        Returns:
            bool: 구조 검사 통과 여부
        """
        rho = FR(random_scalar() if randomness is None else randomness)
        if rho == FR(0):
            raise ValueError("randomness는 0이 아니어야 합니다")

        g1 = self.g1_elements
        g2 = self.g2_elements

        if len(g1) > 1:
            upper, lower = _linear_combinations(g1, rho)
            if not pairings_equal([(upper, g2[0])], [(lower, g2[1])]):
                return False

        if len(g2) > 2:
            upper, lower = _linear_combinations(g2, rho)
            if len(g1) < 2:
                return False
            if not pairings_equal([(g1[0], upper)], [(g1[1], lower)]):
                return False

        return True

    # ─────────────────────────────────────────────────────────────
    # 비교
    # ─────────────────────────────────────────────────────────────

    def __eq__(self, other):
        if not isinstance(other, SRS):
            return NotImplemented
        if self.num_g1 != other.num_g1 or self.num_g2 != other.num_g2:
            return False
        return (
            all(ec_eq(a, b) for a, b in zip(self.g1_elements, other.g1_elements))
            and all(ec_eq(a, b) for a, b in zip(self.g2_elements, other.g2_elements))
        )

    __hash__ = None

    def __repr__(self):
        return f"SRS(num_g1={self.num_g1}, num_g2={self.num_g2})"


def _validate_elements(group, elements, generator, on_curve):
    if not on_curve(elements[0]) or not ec_eq(elements[0], generator):
        raise InvalidPointError(group, 0, "0번 원소가 생성자가 아닙니다")
    for index, point in enumerate(elements[1:], start=1):
        if not on_curve(point):
            raise InvalidPointError(group, index, "곡선 위의 점이 아닙니다")
        if is_identity(point):
            raise InvalidPointError(group, index, "항등원입니다")
        if not in_subgroup(point):
            raise InvalidPointError(group, index, "소수 위수 부분군에 속하지 않습니다")


def _linear_combinations(elements, rho):
    """(Σ ρ^i·P[i+1], Σ ρ^i·P[i]) 를 계산한다."""
    upper = None
    lower = None
    coeff = FR(1)
    for i in range(len(elements) - 1):
        upper_term = ec_mul(elements[i + 1], coeff)
        lower_term = ec_mul(elements[i], coeff)
        upper = upper_term if upper is None else ec_add(upper, upper_term)
        lower = lower_term if lower is None else ec_add(lower, lower_term)
        coeff = coeff * rho
    return upper, lower
