"""
SRS 업데이트 알고리즘
======================

기여자가 새 비밀 s로 SRS를 갱신하고 업데이트 증명을 만든다.

**알고리즘**:
  1. 입력 SRS 검증 (부분군/항등원/생성자)
  2. s의 거듭제곱 s^0, s^1, ..., s^(n-1) 계산
  3. g1[i] ← s^i · g1[i],  g2[i] ← s^i · g2[i]
     (s^0 = 1 이므로 0번 원소인 생성자는 그대로)
  4. PublicKey = (s·G1, s·G2)
  5. UpdateProof = {public_key, 새 SRS}
  6. 개인키 소거

**보장**:
  입력 SRS의 누적 비밀이 τ_old 이면 출력의 누적 비밀은 τ_new = s·τ_old 이다.
  τ_old^i·G 에 s^i 를 곱하면 (s·τ_old)^i·G 가 되므로 구성상 성립하며,
  정당성은 외부에서 powersoftau.verifier.verify_update 로 확인한다.

사용 예시:
    >>> srs = SRS.genesis(Parameters(4, 2))
    >>> new_srs, proof = update(srs, PrivateKey.rand())
"""

import logging

from powersoftau.errors import InvalidContributionError
from powersoftau.field import FR, G1, G2, ec_mul
from powersoftau.keypair import PublicKey
from powersoftau.srs import SRS
from powersoftau.update_proof import UpdateProof

logger = logging.getLogger(__name__)


def update(srs, private_key):
    """개인키로 SRS를 갱신하고 (새 SRS, UpdateProof)를 반환한다.

    입력 SRS는 변경되지 않는다. 개인키는 성공/실패와 관계없이
    이 호출에서 소거되며 다시 사용할 수 없다.

    Args:
        srs: 현재 SRS
        private_key: PrivateKey (이 호출에서 소비됨)

    Returns:
        tuple: (새 SRS, UpdateProof)

    Raises:
        InvalidPointError: 입력 SRS가 검증을 통과하지 못할 때
        InvalidContributionError: 비밀 값이 0이거나 키가 이미 사용되었을 때
    """
    try:
        srs.validate()

        secret = private_key.scalar()
        if secret == FR(0):
            raise InvalidContributionError(
                "비밀 값 0은 SRS를 항등원으로 붕괴시키므로 허용되지 않습니다"
            )

        powers = _powers_of(secret, max(srs.num_g1, srs.num_g2))
        new_srs = SRS(
            _scale_elements(srs.g1_elements, powers),
            _scale_elements(srs.g2_elements, powers),
        )
        public_key = PublicKey(ec_mul(G1, secret), ec_mul(G2, secret))
        del secret, powers
    finally:
        private_key.erase()

    logger.debug("applied contribution to SRS(num_g1=%d, num_g2=%d)",
                 srs.num_g1, srs.num_g2)
    return new_srs, UpdateProof(public_key, new_srs)


def _powers_of(x, n):
    """[x^0, x^1, ..., x^(n-1)] 을 FR 원소로 반환한다."""
    powers = []
    current = FR(1)
    for _ in range(n):
        powers.append(current)
        current = current * x
    return powers


def _scale_elements(elements, powers):
    # 0번 원소는 s^0 = 1 이므로 곱하지 않는다
    return [elements[0]] + [
        ec_mul(point, power) for point, power in zip(elements[1:], powers[1:])
    ]
