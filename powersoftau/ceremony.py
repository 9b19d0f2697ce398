"""
세레모니 검증 (Ceremony Verifier)
==================================

세레모니가 끝난 뒤, 감사자는 시작 SRS, 최종 SRS, 그리고 모든 UpdateProof를
모아 전체 기여 사슬이 올바른지 확인한다.

**검증 과정** (증명 목록에 대한 left fold):
  current = srs_start
  for i, proof in enumerate(proofs):
      verify_update(current, proof.resulting_srs, proof)  실패 → i 번째 단계 실패
      current = proof.resulting_srs
  current == srs_final                                    불일치 → 결과 바인딩 실패

각 단계의 정당성이 다음 단계의 전제가 되므로 단계 간에는 순차적이다.
"단계 i의 기여가 위조됨"과 "최종 SRS가 트랜스크립트 결과와 다름"은
서로 다른 실패로 보고된다.

사용 예시:
    >>> result = verify(genesis, final_srs, [proof_a, proof_b])
    >>> ok, position = verify_and_find_contribution(genesis, final_srs, proofs, my_pk)
"""

import logging

from powersoftau.verifier import FailureReason, VerificationResult, verify_update

logger = logging.getLogger(__name__)


def verify(srs_start, srs_final, proofs):
    """시작 SRS부터 최종 SRS까지의 업데이트 사슬을 검증한다.

    Args:
        srs_start: 세레모니 시작 SRS
        srs_final: 주장된 최종 SRS
        proofs: 순서가 있는 UpdateProof iterable (제너레이터도 가능)

    Returns:
        VerificationResult:
            단계 실패 → reason은 해당 단계의 사유, failed_step은 그 인덱스
            최종 SRS 불일치 → reason == FINAL_SRS_MISMATCH, failed_step is None
    """
    current = srs_start
    count = 0
    for step, proof in enumerate(proofs):
        count = step + 1
        step_result = verify_update(current, proof.resulting_srs, proof)
        if not step_result:
            logger.warning("ceremony verification failed at step %d: %s",
                           step, step_result.reason.value)
            return step_result.at_step(step)
        logger.debug("ceremony step %d verified", step)
        current = proof.resulting_srs

    if current != srs_final:
        logger.warning("ceremony transcript does not end at the claimed final SRS")
        return VerificationResult.failure(FailureReason.FINAL_SRS_MISMATCH)

    logger.info("ceremony verified: %d contributions", count)
    return VerificationResult.ok()


def find_contribution(proofs, public_key):
    """공개키가 기여한 첫 위치를 반환한다 (없으면 None)."""
    for position, proof in enumerate(proofs):
        if proof.public_key == public_key:
            return position
    return None


def verify_and_find_contribution(srs_start, srs_final, proofs, public_key):
    """세레모니를 검증하고 공개키의 기여 위치를 찾는다.

    Returns:
        tuple: (bool, Optional[int])
            세레모니가 유효하면 (True, 위치 또는 None),
            유효하지 않으면 (False, None)

    예시:
        >>> verify_and_find_contribution(genesis, final_srs, [p1, p2, p3], pk2)
        (True, 1)
    """
    proofs = list(proofs)
    result = verify(srs_start, srs_final, proofs)
    if not result:
        return False, None
    return True, find_contribution(proofs, public_key)
