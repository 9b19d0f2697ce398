"""
Tests for powersoftau.ceremony: whole-transcript verification and lookup.
"""

import logging

from powersoftau.field import FR, G1, G2, ec_mul, ec_eq
from powersoftau.keypair import PrivateKey
from powersoftau.parameters import Parameters
from powersoftau.srs import SRS
from powersoftau.update import update
from powersoftau.update_proof import UpdateProof
from powersoftau.verifier import FailureReason
from powersoftau.ceremony import verify, find_contribution, verify_and_find_contribution


class TestCeremonyVerify:
    """세레모니 전체 검증 테스트."""

    def test_three_contributions(self, ceremony_chain):
        srs = ceremony_chain["srs"]
        result = verify(srs[0], srs[-1], ceremony_chain["proofs"])
        assert result
        assert result.failed_step is None

    def test_generator_transcript(self, ceremony_chain, caplog):
        """Proofs streamed from a generator verify like a list."""
        srs = ceremony_chain["srs"]
        proofs = (proof for proof in ceremony_chain["proofs"])
        with caplog.at_level(logging.INFO, logger="powersoftau.ceremony"):
            result = verify(srs[0], srs[-1], proofs)
        assert result
        assert "ceremony verified: 3 contributions" in caplog.text

    def test_generator_transcript_failure(self, ceremony_chain):
        srs = ceremony_chain["srs"]
        proofs = ceremony_chain["proofs"]
        result = verify(srs[0], srs[-1], (p for p in [proofs[1], proofs[0], proofs[2]]))
        assert result.failed_step == 0

    def test_final_tau_is_product(self, ceremony_chain, toxic_secrets):
        """tau_final = s1·s2·s3."""
        tau = FR(toxic_secrets[0]) * FR(toxic_secrets[1]) * FR(toxic_secrets[2])
        final = ceremony_chain["srs"][-1]
        assert ec_eq(final.g1_elements[1], ec_mul(G1, tau))
        assert ec_eq(final.g1_elements[3], ec_mul(G1, tau ** 3))
        assert ec_eq(final.g2_elements[1], ec_mul(G2, tau))

    def test_empty_transcript(self, genesis_srs, first_update):
        """No proofs: valid only when final == start."""
        assert verify(genesis_srs, genesis_srs, [])
        result = verify(genesis_srs, first_update[0], [])
        assert result.reason == FailureReason.FINAL_SRS_MISMATCH

    def test_wrong_final_srs(self, ceremony_chain):
        """A correct chain that does not end at the claimed final SRS."""
        srs = ceremony_chain["srs"]
        result = verify(srs[0], srs[2], ceremony_chain["proofs"])
        assert not result
        assert result.reason == FailureReason.FINAL_SRS_MISMATCH
        assert result.failed_step is None

    def test_dropped_proof_reports_step(self, ceremony_chain):
        """Removing the middle proof breaks the chain at the new step 1."""
        srs = ceremony_chain["srs"]
        proofs = ceremony_chain["proofs"]
        result = verify(srs[0], srs[-1], [proofs[0], proofs[2]])
        assert not result
        assert result.failed_step == 1
        assert result.reason == FailureReason.FIRST_POWER_TRANSITION

    def test_reordered_proofs(self, ceremony_chain):
        srs = ceremony_chain["srs"]
        proofs = ceremony_chain["proofs"]
        result = verify(srs[0], srs[-1], [proofs[1], proofs[0], proofs[2]])
        assert result.failed_step == 0

    def test_forged_middle_step(self, ceremony_chain):
        srs = ceremony_chain["srs"]
        proofs = list(ceremony_chain["proofs"])
        intruder = PrivateKey.from_int(0xBAD).to_public()
        proofs[1] = UpdateProof(intruder, proofs[1].resulting_srs)
        result = verify(srs[0], srs[-1], proofs)
        assert result.failed_step == 1


class TestFindContribution:
    """기여 위치 찾기 테스트."""

    def test_find_each(self, ceremony_chain):
        proofs = ceremony_chain["proofs"]
        for position, public_key in enumerate(ceremony_chain["public_keys"]):
            assert find_contribution(proofs, public_key) == position

    def test_unknown_key(self, ceremony_chain):
        unknown = PrivateKey.from_int(424242).to_public()
        assert find_contribution(ceremony_chain["proofs"], unknown) is None

    def test_verify_and_find(self, ceremony_chain):
        srs = ceremony_chain["srs"]
        proofs = ceremony_chain["proofs"]
        pk_2 = ceremony_chain["public_keys"][1]
        assert verify_and_find_contribution(srs[0], srs[-1], proofs, pk_2) == (True, 1)

    def test_verify_and_find_generator(self, ceremony_chain):
        srs = ceremony_chain["srs"]
        pk_3 = ceremony_chain["public_keys"][2]
        proofs = iter(ceremony_chain["proofs"])
        assert verify_and_find_contribution(srs[0], srs[-1], proofs, pk_3) == (True, 2)

    def test_verify_and_find_unknown(self, ceremony_chain):
        srs = ceremony_chain["srs"]
        unknown = PrivateKey.from_int(424242).to_public()
        assert verify_and_find_contribution(
            srs[0], srs[-1], ceremony_chain["proofs"], unknown
        ) == (True, None)

    def test_verify_and_find_invalid_ceremony(self, ceremony_chain):
        srs = ceremony_chain["srs"]
        pk_1 = ceremony_chain["public_keys"][0]
        assert verify_and_find_contribution(
            srs[0], srs[1], ceremony_chain["proofs"], pk_1
        ) == (False, None)


class TestEndToEnd:
    """두 기여자의 KZG 세레모니 전체 흐름."""

    def test_two_party_kzg(self):
        a, b = 0x1234, 0x5678
        genesis = SRS.genesis(Parameters(4, 2))
        srs_a, proof_a = update(genesis, PrivateKey.from_int(a))
        srs_b, proof_b = update(srs_a, PrivateKey.from_int(b))

        assert verify(genesis, srs_b, [proof_a, proof_b])
        assert ec_eq(srs_b.g1_elements[1], ec_mul(G1, a * b))
        assert srs_b.subgroup_check()
