"""
서브 세레모니 묶음 (Contribution)
==================================

한 기여자는 크기가 다른 여러 서브 세레모니에 한 번에 기여한다
(기본값은 parameters.CEREMONIES 의 4개). 서브 세레모니마다 독립된
비밀 값을 쓰며, 결과로 SRS 묶음과 UpdateProof 목록이 나온다.

비밀 값과 검증용 랜덤 값은 "0x" 접두사가 붙은 hex 문자열로 전달된다.

사용 예시:
    >>> contribution = Contribution.genesis([Parameters(4, 2), Parameters(8, 2)])
    >>> new_contribution, proofs = update_contribution(contribution, ["0x01ab", "0x02cd"])
    >>> contribution_verify_update(contribution, new_contribution, proofs, ["0x05", "0x07"])
    True
"""

import logging

from powersoftau.errors import DeserializationError
from powersoftau.field import FR
from powersoftau.keypair import PrivateKey
from powersoftau.parameters import CEREMONIES
from powersoftau.serialization import decode_hex, srs_from_json, srs_to_json
from powersoftau.srs import SRS
from powersoftau.update import update
from powersoftau.verifier import verify_update

logger = logging.getLogger(__name__)


class Contribution:
    """서브 세레모니 SRS 묶음.

    속성:
        sub_ceremonies: tuple[SRS]
        parameters: tuple[Parameters], 각 서브 세레모니의 크기
    """

    def __init__(self, sub_ceremonies, parameters=CEREMONIES):
        self.sub_ceremonies = tuple(sub_ceremonies)
        self.parameters = tuple(parameters)
        if len(self.sub_ceremonies) != len(self.parameters):
            raise ValueError(
                f"서브 세레모니 수({len(self.sub_ceremonies)})가 "
                f"파라미터 수({len(self.parameters)})와 다릅니다"
            )

    @classmethod
    def genesis(cls, parameters=CEREMONIES):
        return cls([SRS.genesis(p) for p in parameters], parameters)

    def check_shape(self):
        """각 SRS의 길이가 해당 파라미터와 일치하는지 확인한다."""
        return all(srs.matches(p) for srs, p in zip(self.sub_ceremonies, self.parameters))

    def __len__(self):
        return len(self.sub_ceremonies)


def update_contribution(contribution, secrets):
    """모든 서브 세레모니를 각자의 비밀 값으로 갱신한다.

    Args:
        contribution: Contribution
        secrets: 서브 세레모니 수만큼의 "0x" hex 문자열

    Returns:
        tuple: (새 Contribution, list[UpdateProof])

    Raises:
        ValueError: 비밀 값 개수나 SRS 크기가 맞지 않을 때
        DeserializationError: hex 형식이 잘못되었을 때
        InvalidContributionError: 비밀 값이 0일 때
        InvalidPointError: 받은 SRS가 검증에 실패할 때
    """
    if len(secrets) != len(contribution):
        raise ValueError(f"비밀 값은 {len(contribution)}개여야 합니다: {len(secrets)}")
    if not contribution.check_shape():
        raise ValueError("SRS 크기가 세레모니 파라미터와 맞지 않습니다")

    # 하나라도 잘못된 hex면 키를 만들기 전에 실패한다
    raw_secrets = [decode_hex(s) for s in secrets]

    private_keys = []
    new_sub_ceremonies = []
    proofs = []
    try:
        for raw in raw_secrets:
            private_keys.append(PrivateKey.from_bytes(raw))
        for srs, private_key in zip(contribution.sub_ceremonies, private_keys):
            new_srs, proof = update(srs, private_key)
            new_sub_ceremonies.append(new_srs)
            proofs.append(proof)
    finally:
        for private_key in private_keys:
            private_key.erase()

    logger.debug("updated %d sub-ceremonies", len(proofs))
    return Contribution(new_sub_ceremonies, contribution.parameters), proofs


def contribution_subgroup_check(contribution):
    """모든 서브 세레모니 SRS의 부분군 검사."""
    return all(srs.subgroup_check() for srs in contribution.sub_ceremonies)


def contribution_verify_update(old_contribution, new_contribution, proofs, random_hex_elements):
    """모든 서브 세레모니의 업데이트를 검증한다.

    random_hex_elements 는 서브 세레모니별 등비 검사 결합 계수이다.
    잘못된 입력은 예외 대신 False로 처리한다.
    """
    count = len(old_contribution)
    if not (len(new_contribution) == len(proofs) == len(random_hex_elements) == count):
        logger.warning("contribution verification: mismatched lengths")
        return False

    for i in range(count):
        try:
            randomness = int.from_bytes(decode_hex(random_hex_elements[i]), "big")
        except DeserializationError:
            logger.warning("contribution verification: malformed randomness at %d", i)
            return False
        if FR(randomness) == FR(0):
            logger.warning("contribution verification: zero randomness at %d", i)
            return False

        before = old_contribution.sub_ceremonies[i]
        after = new_contribution.sub_ceremonies[i]
        if not verify_update(before, after, proofs[i], randomness):
            logger.warning("contribution verification failed for sub-ceremony %d", i)
            return False

    return True


def contribution_to_json(contribution):
    return {"sub_ceremonies": [srs_to_json(srs) for srs in contribution.sub_ceremonies]}


def contribution_from_json(data, parameters=CEREMONIES):
    try:
        sub_ceremonies_json = data["sub_ceremonies"]
    except (KeyError, TypeError) as exc:
        raise DeserializationError("Contribution JSON에 sub_ceremonies가 없습니다") from exc
    if len(sub_ceremonies_json) != len(parameters):
        raise DeserializationError(
            f"서브 세레모니는 {len(parameters)}개여야 합니다: {len(sub_ceremonies_json)}"
        )
    return Contribution(
        [srs_from_json(s, p) for s, p in zip(sub_ceremonies_json, parameters)],
        parameters,
    )
