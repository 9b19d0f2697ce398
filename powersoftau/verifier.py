"""
업데이트 검증 (Update Verifier)
================================

이전 SRS, 새 SRS, UpdateProof가 주어졌을 때 기여가 올바른지 페어링으로 판단한다.

**검증 과정**:
  0. 사전 검사: 파라미터 일치, 곡선 위의 점/항등원 아님,
     증명 스냅샷 == 새 SRS, 0번 생성자 유지
  1. 지식 증명 일관성
       e(s·G1, G2) == e(G1, s·G2)
     → 두 커밋먼트가 같은 비밀 s를 담고 있음
  2. 1차 거듭제곱 전이
       e(τ_new·G1, G2) == e(τ_old·G1, s·G2)
     → 새 τ·G1 은 이전 τ·G1 에 커밋된 s를 곱한 것
  3. 새 SRS 내부 등비(same-ratio) 검사
       e(g1[i+1], g2[0]) == e(g1[i], g2[1])   (모든 i)
     → 2번의 결과가 귀납적으로 모든 고차 거듭제곱에 이어짐

검증 실패는 예외가 아니다. 프로토콜 검증자는 잘못된 기여를 거절하고
다음 기여를 계속 처리해야 하므로, 결과는 항상 VerificationResult 값으로 반환된다.

사용 예시:
    >>> result = verify_update(old_srs, new_srs, proof)
    >>> if not result:
    ...     print(result.reason)
"""

import enum
import logging

from powersoftau.field import (
    FR, G1, G2,
    ec_eq, is_identity, is_on_curve_g1, is_on_curve_g2, pairings_equal,
)
from powersoftau.srs import SRS

logger = logging.getLogger(__name__)


class FailureReason(enum.Enum):
    """검증 실패 분류."""
    PARAMETER_MISMATCH = "parameter_mismatch"
    SNAPSHOT_MISMATCH = "snapshot_mismatch"
    INVALID_POINT = "invalid_point"
    GENERATOR_CHANGED = "generator_changed"
    INVALID_RANDOMNESS = "invalid_randomness"
    PROOF_OF_KNOWLEDGE = "proof_of_knowledge"
    FIRST_POWER_TRANSITION = "first_power_transition"
    STRUCTURE = "structure"
    FINAL_SRS_MISMATCH = "final_srs_mismatch"


class VerificationResult:
    """검증 결과. bool 문맥에서 성공 여부로 평가된다.

    속성:
        valid: 검증 성공 여부
        reason: 실패 시 FailureReason, 성공 시 None
        failed_step: 세레모니 검증에서 실패한 증명의 인덱스 (0부터)
    """

    __slots__ = ("valid", "reason", "failed_step")

    def __init__(self, valid, reason=None, failed_step=None):
        self.valid = valid
        self.reason = reason
        self.failed_step = failed_step

    @classmethod
    def ok(cls):
        return cls(True)

    @classmethod
    def failure(cls, reason, failed_step=None):
        return cls(False, reason, failed_step)

    def at_step(self, step):
        """같은 실패 사유에 세레모니 내 위치를 붙인 결과를 반환한다."""
        return VerificationResult(self.valid, self.reason, step)

    def __bool__(self):
        return self.valid

    def __eq__(self, other):
        if isinstance(other, bool):
            return self.valid is other
        if not isinstance(other, VerificationResult):
            return NotImplemented
        return (
            self.valid == other.valid
            and self.reason == other.reason
            and self.failed_step == other.failed_step
        )

    __hash__ = None

    def __repr__(self):
        if self.valid:
            return "VerificationResult(valid=True)"
        return (f"VerificationResult(valid=False, reason={self.reason.value}, "
                f"failed_step={self.failed_step})")


def verify_update(srs_old, srs_new, proof, randomness=None):
    """srs_old → srs_new 전이가 proof로 정당화되는지 검증한다.

    Args:
        srs_old: 기여 이전 SRS (신뢰된 상태로 가정)
        srs_new: 기여 이후 SRS
        proof: UpdateProof
        randomness: 등비 검사 결합 계수 ρ (None이면 새로 생성)

    Returns:
        VerificationResult: 실패 시 reason이 설정됨. 예외를 던지지 않는다.
    """
    result = _check_update(srs_old, srs_new, proof, randomness)
    if not result:
        logger.warning("update rejected: %s", result.reason.value)
    return result


def _check_update(srs_old, srs_new, proof, randomness):
    # ── Step 0: 사전 검사 (페어링 없이 가능한 것) ──
    if (srs_old.num_g1 != srs_new.num_g1 or srs_old.num_g2 != srs_new.num_g2
            or srs_new.num_g1 < 1 or srs_new.num_g2 < 2):
        return VerificationResult.failure(FailureReason.PARAMETER_MISMATCH)

    public_key = proof.public_key
    if not _all_valid_points(srs_new, public_key, srs_old):
        return VerificationResult.failure(FailureReason.INVALID_POINT)

    if not _snapshot_matches(proof.resulting_srs, srs_new):
        return VerificationResult.failure(FailureReason.SNAPSHOT_MISMATCH)

    if not ec_eq(srs_new.g1_elements[0], G1) or not ec_eq(srs_new.g2_elements[0], G2):
        return VerificationResult.failure(FailureReason.GENERATOR_CHANGED)

    if randomness is not None and FR(randomness) == FR(0):
        return VerificationResult.failure(FailureReason.INVALID_RANDOMNESS)

    # ── Step 1: 지식 증명 일관성 ──
    # e(s·G1, G2) == e(G1, s·G2)
    if not pairings_equal([(public_key.g1_commit, G2)], [(G1, public_key.g2_commit)]):
        return VerificationResult.failure(FailureReason.PROOF_OF_KNOWLEDGE)

    # ── Step 2: 1차 거듭제곱 전이 ──
    if srs_new.num_g1 > 1:
        # e(τ_new·G1, G2) == e(τ_old·G1, s·G2)
        transition_ok = pairings_equal(
            [(srs_new.g1_elements[1], G2)],
            [(srs_old.g1_elements[1], public_key.g2_commit)],
        )
    else:
        # τ·G1 이 없으면 G2 쪽에서 확인: e(G1, τ_new·G2) == e(s·G1, τ_old·G2)
        transition_ok = pairings_equal(
            [(G1, srs_new.g2_elements[1])],
            [(public_key.g1_commit, srs_old.g2_elements[1])],
        )
    if not transition_ok:
        return VerificationResult.failure(FailureReason.FIRST_POWER_TRANSITION)

    # ── Step 3: 새 SRS 내부 등비 검사 ──
    if not srs_new.structure_check(randomness):
        return VerificationResult.failure(FailureReason.STRUCTURE)

    return VerificationResult.ok()


def _all_valid_points(srs_new, public_key, srs_old):
    """모든 점이 올바른 곡선 위에 있고 항등원이 아닌지 확인한다.

    페어링 함수는 곡선 밖의 점에 대해 assert로 실패하므로
    페어링 전에 반드시 확인한다. 부분군 검사는 역직렬화 시점에 이루어진다.
    """
    if not _valid_g1(public_key.g1_commit) or not _valid_g2(public_key.g2_commit):
        return False
    if not all(_valid_g1(p) for p in srs_new.g1_elements):
        return False
    if not all(_valid_g2(p) for p in srs_new.g2_elements):
        return False
    # 이전 SRS에서는 2번 검사에 쓰이는 1차 원소만 필요하다
    if srs_old.num_g1 > 1:
        return _valid_g1(srs_old.g1_elements[1])
    return _valid_g2(srs_old.g2_elements[1])


def _snapshot_matches(snapshot, srs_new):
    """증명에 담긴 스냅샷이 새 SRS와 같은지 확인한다. srs_new 는 이미 검사된 상태이다."""
    if snapshot is srs_new:
        return True
    if not isinstance(snapshot, SRS):
        return False
    if snapshot.num_g1 != srs_new.num_g1 or snapshot.num_g2 != srs_new.num_g2:
        return False
    # 잘못된 점이 섞인 스냅샷은 ec_eq 에 넘기지 않는다
    if not all(_valid_g1(p) for p in snapshot.g1_elements):
        return False
    if not all(_valid_g2(p) for p in snapshot.g2_elements):
        return False
    return snapshot == srs_new


def _valid_g1(point):
    return is_on_curve_g1(point) and not is_identity(point)


def _valid_g2(point):
    return is_on_curve_g2(point) and not is_identity(point)
