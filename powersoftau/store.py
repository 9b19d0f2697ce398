"""
세레모니 트랜스크립트 저장소 (TinyDB)
======================================

시작 SRS와 승인된 UpdateProof 목록을 TinyDB에 JSON 형태로 보관한다.
레코드는 {"type": <키>, "data": <값>} 형식이며, 증명은 "proof.<순번>" 키로 저장된다.

검증에 실패한 증명은 저장하지 않는다. 부분 승인은 없다.

사용 예시:
    >>> from tinydb import TinyDB
    >>> from tinydb.storages import MemoryStorage
    >>> store = CeremonyStore(TinyDB(storage=MemoryStorage), Parameters(4, 2))
    >>> store.set_starting_srs(SRS.genesis(store.parameters))
    >>> new_srs, proof = update(store.current_srs(), PrivateKey.rand())
    >>> store.append_proof(proof)
"""

import logging

from tinydb import Query

from powersoftau import ceremony
from powersoftau.serialization import (
    srs_from_json, srs_to_json, update_proof_from_json, update_proof_to_json,
)
from powersoftau.verifier import verify_update

logger = logging.getLogger(__name__)

DATA = Query()

STARTING_SRS_KEY = "ceremony.starting_srs"
PROOF_KEY_PREFIX = "proof."


class CeremonyStore:
    """TinyDB 기반 세레모니 트랜스크립트 저장소.

    속성:
        db: TinyDB 인스턴스 (또는 테이블)
        parameters: 이 세레모니의 Parameters
    """

    def __init__(self, db, parameters):
        self.db = db
        self.parameters = parameters

    # ─── DB 헬퍼 ───

    def _get(self, key):
        result = self.db.search(DATA.type == key)
        if not result:
            return None
        return result[0].get("data")

    def _set(self, key, data):
        self.db.upsert({"type": key, "data": data}, DATA.type == key)

    # ─── 트랜스크립트 ───

    def set_starting_srs(self, srs):
        """시작 SRS를 저장한다. 이미 증명이 있으면 거부한다."""
        if self.proof_count():
            raise ValueError("증명이 저장된 뒤에는 시작 SRS를 바꿀 수 없습니다")
        if not srs.matches(self.parameters):
            raise ValueError(f"SRS 크기가 {self.parameters!r}와 다릅니다")
        self._set(STARTING_SRS_KEY, srs_to_json(srs))

    def starting_srs(self):
        data = self._get(STARTING_SRS_KEY)
        if data is None:
            return None
        return srs_from_json(data, self.parameters)

    def proof_count(self):
        return self.db.count(DATA.type.test(lambda t: t.startswith(PROOF_KEY_PREFIX)))

    def proofs(self):
        """저장된 UpdateProof 목록 (기여 순서)."""
        records = self.db.search(DATA.type.test(lambda t: t.startswith(PROOF_KEY_PREFIX)))
        records.sort(key=lambda r: int(r["type"][len(PROOF_KEY_PREFIX):]))
        return [update_proof_from_json(r["data"], self.parameters) for r in records]

    def current_srs(self):
        """마지막으로 승인된 SRS (증명이 없으면 시작 SRS)."""
        count = self.proof_count()
        if count == 0:
            return self.starting_srs()
        data = self._get(f"{PROOF_KEY_PREFIX}{count - 1}")
        return srs_from_json(data["resulting_srs"], self.parameters)

    def append_proof(self, proof):
        """현재 SRS에 대해 증명을 검증하고, 통과하면 저장한다.

        Returns:
            VerificationResult: 실패 시 저장되지 않음
        """
        current = self.current_srs()
        if current is None:
            raise ValueError("시작 SRS가 설정되지 않았습니다")

        result = verify_update(current, proof.resulting_srs, proof)
        if not result:
            logger.warning("rejected contribution: %s", result.reason.value)
            return result

        position = self.proof_count()
        self._set(f"{PROOF_KEY_PREFIX}{position}", update_proof_to_json(proof))
        logger.info("stored contribution at position %d", position)
        return result

    def verify(self, srs_final=None):
        """저장된 트랜스크립트 전체를 검증한다.

        Args:
            srs_final: 주장된 최종 SRS (None이면 마지막 저장 SRS)
        """
        start = self.starting_srs()
        if start is None:
            raise ValueError("시작 SRS가 설정되지 않았습니다")
        if srs_final is None:
            srs_final = self.current_srs()
        return ceremony.verify(start, srs_final, self.proofs())

    def find_contribution(self, public_key):
        return ceremony.find_contribution(self.proofs(), public_key)

    def clear(self):
        """모든 레코드를 삭제한다."""
        self.db.remove(DATA.type.test(
            lambda t: t == STARTING_SRS_KEY or t.startswith(PROOF_KEY_PREFIX)
        ))
