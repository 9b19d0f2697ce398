"""
Powers of Tau 기반 모듈: 스칼라 필드 및 BLS12-381 곡선 연산
============================================================

이 모듈은 세레모니 전체에서 사용되는 기본 대수적 도구를 정의한다.

**스칼라 필드 FR**:
  BLS12-381 곡선의 스칼라 필드. 기여자의 비밀 값 s와 그 거듭제곱
  s^0, s^1, ..., s^(n-1)은 모두 FR 원소로 계산된다.
  - 위수(order) r ≈ 2^255, 소수체(prime field)

**타원곡선 연산**:
  G1 (Fq 위), G2 (Fq2 위) 그룹 연산과 optimal Ate 페어링.
  py_ecc의 optimized 구현은 사영(projective) 좌표 (x, y, z)를 사용하므로
  같은 점이라도 튜플 표현이 다를 수 있다 → 비교는 반드시 ec_eq를 사용한다.

**부분군(subgroup) 검사**:
  BLS12-381의 G1, G2는 cofactor가 1이 아니다. 곡선 위의 점이라도
  소수 위수 부분군 밖에 있을 수 있으며, 이런 점을 받아들이면
  small-subgroup 공격으로 다른 참여자의 비밀 비트가 누출될 수 있다.
  in_subgroup은 r·P == O 를 직접 확인한다.

사용 예시:
    >>> from powersoftau.field import FR, G1, ec_mul
    >>> s = FR(3)
    >>> P = ec_mul(G1, s * s)   # 9·G1
    >>> in_subgroup(P)          # True
"""

import secrets

from py_ecc.fields import bls12_381_FQ as FQ
from py_ecc import optimized_bls12_381 as bls12


# ─────────────────────────────────────────────────────────────────────
# 스칼라 필드 FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """BLS12-381 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> s = FR(5)
        >>> s ** 3          # FR(125)
        >>> FR(1) / s       # 5의 모듈러 역원
    """
    field_modulus = bls12.curve_order


# 곡선 위수 (스칼라 필드 크기, 부분군 위수 r)
CURVE_ORDER = bls12.curve_order


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# G1, G2 그룹 생성자 (prime subgroup generator)
G1 = bls12.G1
G2 = bls12.G2

# 항등원 (point at infinity): 사영 좌표에서 z = 0
Z1 = bls12.Z1
Z2 = bls12.Z2


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    스칼라는 CURVE_ORDER로 축약된 뒤 곱해진다.
    부분군 검사처럼 축약 없이 곱해야 하는 경우에는 in_subgroup을 사용한다.

    Args:
        point: G1 또는 G2 위의 점
        scalar: 정수 또는 FR 원소

    Returns:
        scalar · point (같은 그룹의 점)
    """
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bls12.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2."""
    return bls12.add(p1, p2)


def ec_neg(point):
    """타원곡선 점의 역원: -point."""
    return bls12.neg(point)


def ec_eq(p1, p2):
    """두 점이 같은지 비교한다.

    사영 좌표 (X, Y, Z)는 같은 점을 여러 방식으로 표현하므로
    튜플 비교(==) 대신 X1·Z2 == X2·Z1, Y1·Z2 == Y2·Z1 을 확인하는
    py_ecc의 eq를 사용한다.
    """
    return bls12.eq(p1, p2)


def is_identity(point):
    """점이 항등원(무한원점)인지 확인한다."""
    return bls12.is_inf(point)


def is_on_curve_g1(point):
    """G1 곡선 방정식 y² = x³ + 4 를 만족하는지 확인한다."""
    return _is_point(point, bls12.FQ) and bls12.is_on_curve(point, bls12.b)


def is_on_curve_g2(point):
    """G2 (twist) 곡선 방정식 y² = x³ + 4(u+1) 을 만족하는지 확인한다."""
    return _is_point(point, bls12.FQ2) and bls12.is_on_curve(point, bls12.b2)


def _is_point(point, coordinate_type):
    return (
        isinstance(point, tuple)
        and len(point) == 3
        and all(isinstance(c, coordinate_type) for c in point)
    )


def in_subgroup(point):
    """점이 소수 위수 r 부분군에 속하는지 확인한다.

    r·P == O 이면 P의 위수는 r을 나누고, r이 소수이므로 P ∈ 부분군이다.
    항등원도 부분군에 속하므로 True를 반환한다 (항등원 거부는 호출자 몫).

    Args:
        point: 곡선 위의 G1 또는 G2 점

    Returns:
        bool: 부분군 소속 여부

    예시:
        >>> in_subgroup(G1)   # True
    """
    # CURVE_ORDER로 축약하면 항상 0이 되므로 ec_mul을 쓰면 안 된다
    return bls12.is_inf(bls12.multiply(point, CURVE_ORDER))


def normalize(point):
    """사영 좌표를 아핀 좌표 (x, y)로 변환한다."""
    return bls12.normalize(point)


# ─────────────────────────────────────────────────────────────────────
# 페어링
# ─────────────────────────────────────────────────────────────────────

def ec_pairing(g2_point, g1_point):
    """쌍선형 페어링 e(G1, G2) → GT.

    주의:
        py_ecc 페어링의 인자 순서는 (G2, G1)이다.

    예시:
        >>> e1 = ec_pairing(G2, ec_mul(G1, 6))
        >>> e2 = ec_pairing(ec_mul(G2, 2), ec_mul(G1, 3))
        >>> e1 == e2  # True (쌍선형성)
    """
    return bls12.pairing(g2_point, g1_point)


def pairings_equal(lhs_pairs, rhs_pairs):
    """두 페어링 곱이 같은지 확인한다.

        ∏ e(a_i, b_i) == ∏ e(c_j, d_j)

    우변의 G1 점을 부호 반전하여 하나의 곱으로 합친 뒤
    ∏ e(a_i, b_i) · ∏ e(-c_j, d_j) == 1 을 확인한다.
    Miller loop만 각각 수행하고 최종 지수승(final exponentiation)은
    한 번만 계산한다.

    Args:
        lhs_pairs: [(g1_point, g2_point), ...] 좌변
        rhs_pairs: [(g1_point, g2_point), ...] 우변

    Returns:
        bool: 두 페어링 곱의 일치 여부

    예시:
        >>> pairings_equal([(ec_mul(G1, 6), G2)], [(ec_mul(G1, 3), ec_mul(G2, 2))])
        True
    """
    acc = bls12.FQ12.one()
    for g1_point, g2_point in lhs_pairs:
        acc = acc * bls12.pairing(g2_point, g1_point, final_exponentiate=False)
    for g1_point, g2_point in rhs_pairs:
        acc = acc * bls12.pairing(g2_point, ec_neg(g1_point), final_exponentiate=False)
    return bls12.final_exponentiate(acc) == bls12.FQ12.one()


# ─────────────────────────────────────────────────────────────────────
# 난수
# ─────────────────────────────────────────────────────────────────────

def random_scalar():
    """암호학적으로 안전한 0이 아닌 스칼라를 생성한다.

    Returns:
        int: 1 ≤ x < CURVE_ORDER
    """
    return secrets.randbelow(CURVE_ORDER - 1) + 1
