"""
Powers of Tau — 다자간 신뢰 설정(trusted setup) 세레모니
=========================================================

여러 참여자가 차례로 비밀 값을 섞어 넣어 KZG용 SRS를 만든다.
참여자 중 한 명이라도 자신의 비밀을 지웠다면 최종 τ는 누구도 알 수 없다.

  genesis SRS ──update(s₁)──▶ SRS₁ ──update(s₂)──▶ SRS₂ ── ... ──▶ final SRS
                  │                     │
               proof₁                proof₂          ← 감사자가 verify로 확인

사용 예시:
    >>> from powersoftau import Parameters, SRS, PrivateKey, update, verify_update
    >>> srs = SRS.genesis(Parameters(4, 2))
    >>> new_srs, proof = update(srs, PrivateKey.rand())
    >>> bool(verify_update(srs, new_srs, proof))
    True
"""

from powersoftau.errors import (
    PowersOfTauError, DeserializationError, InvalidPointError, InvalidContributionError,
)
from powersoftau.parameters import Parameters, CEREMONIES, load_parameters
from powersoftau.keypair import PrivateKey, PublicKey
from powersoftau.srs import SRS
from powersoftau.update_proof import UpdateProof
from powersoftau.update import update
from powersoftau.verifier import FailureReason, VerificationResult, verify_update
from powersoftau.ceremony import verify, find_contribution, verify_and_find_contribution
from powersoftau.contribution import (
    Contribution, update_contribution, contribution_subgroup_check,
    contribution_verify_update,
)
from powersoftau.store import CeremonyStore

__all__ = [
    "PowersOfTauError", "DeserializationError", "InvalidPointError",
    "InvalidContributionError",
    "Parameters", "CEREMONIES", "load_parameters",
    "PrivateKey", "PublicKey",
    "SRS", "UpdateProof",
    "update",
    "FailureReason", "VerificationResult", "verify_update",
    "verify", "find_contribution", "verify_and_find_contribution",
    "Contribution", "update_contribution", "contribution_subgroup_check",
    "contribution_verify_update",
    "CeremonyStore",
]
