"""
Tests for powersoftau.verifier.verify_update.

Covers:
- honest update accepted (fixed and fresh randomness)
- each failure reason: parameter mismatch, snapshot mismatch, invalid point,
  changed generator, zero randomness, proof of knowledge, first power
  transition, broken structure
- zero-secret attack rejected without raising
- single G1 element ceremonies use the G2 transition check
"""

import pytest

from powersoftau.field import G1, G2, Z1, Z2, ec_mul
from powersoftau.keypair import PrivateKey, PublicKey
from powersoftau.parameters import Parameters
from powersoftau.srs import SRS
from powersoftau.update import update
from powersoftau.update_proof import UpdateProof
from powersoftau.verifier import FailureReason, VerificationResult, verify_update


def tampered_g1(srs, index, point):
    g1 = list(srs.g1_elements)
    g1[index] = point
    return SRS(g1, srs.g2_elements)


class TestHonestUpdate:
    """정직한 기여 검증 테스트."""

    def test_accepted(self, genesis_srs, first_update, rho):
        new_srs, proof = first_update
        result = verify_update(genesis_srs, new_srs, proof, rho)
        assert result
        assert result.valid
        assert result.reason is None

    def test_accepted_with_fresh_randomness(self, genesis_srs, first_update):
        new_srs, proof = first_update
        assert verify_update(genesis_srs, new_srs, proof)

    def test_second_contribution_accepted(self, first_update, rho):
        srs_1, _ = first_update
        srs_2, proof_2 = update(srs_1, PrivateKey.from_int(0xBEEF))
        assert verify_update(srs_1, srs_2, proof_2, rho)

    def test_wide_g2_accepted(self, wide_params, rho):
        genesis = SRS.genesis(wide_params)
        new_srs, proof = update(genesis, PrivateKey.from_int(12345))
        assert verify_update(genesis, new_srs, proof, rho)

    def test_single_g1_element(self, rho):
        """With only G1 in the vector, the transition is checked through tau·G2."""
        genesis = SRS.genesis(Parameters(1, 2))
        new_srs, proof = update(genesis, PrivateKey.from_int(777))
        assert verify_update(genesis, new_srs, proof, rho)

        other = PrivateKey.from_int(778).to_public()
        forged = UpdateProof(other, new_srs)
        result = verify_update(genesis, new_srs, forged, rho)
        assert result.reason == FailureReason.FIRST_POWER_TRANSITION


class TestRejectedUpdates:
    """잘못된 기여 거절 테스트."""

    def test_parameter_mismatch(self, genesis_srs, rho):
        smaller = SRS.genesis(Parameters(3, 2))
        new_srs, proof = update(smaller, PrivateKey.from_int(5))
        result = verify_update(genesis_srs, new_srs, proof, rho)
        assert not result
        assert result.reason == FailureReason.PARAMETER_MISMATCH

    def test_snapshot_mismatch(self, genesis_srs, first_update, rho):
        """The proof must carry the SRS it claims to justify."""
        _, proof = first_update
        other_srs, _ = update(genesis_srs, PrivateKey.from_int(99))
        result = verify_update(genesis_srs, other_srs, proof, rho)
        assert result.reason == FailureReason.SNAPSHOT_MISMATCH

    @pytest.mark.parametrize("snapshot", [
        SRS([G1, None, None, None], [G2, None]),
        SRS([G1, G2, G1, G1], [G2, G2]),
        SRS([G1], [G2, G2]),
        None,
    ])
    def test_malformed_snapshot(self, genesis_srs, first_update, rho, snapshot):
        """A proof carrying a broken snapshot is rejected, not raised."""
        new_srs, proof = first_update
        result = verify_update(genesis_srs, new_srs, UpdateProof(proof.public_key, snapshot), rho)
        assert not result
        assert result.reason == FailureReason.SNAPSHOT_MISMATCH

    def test_malformed_new_srs(self, genesis_srs, first_update, rho):
        """None elements in the new SRS are reported as invalid points."""
        _, proof = first_update
        broken = SRS([G1, None, None, None], [G2, None])
        result = verify_update(genesis_srs, broken, UpdateProof(proof.public_key, broken), rho)
        assert result.reason == FailureReason.INVALID_POINT

    def test_zero_secret_attack(self, genesis_srs, rho):
        """A hand-built all-identity contribution is rejected, not raised."""
        collapsed = SRS([G1, Z1, Z1, Z1], [G2, Z2])
        proof = UpdateProof(PublicKey(Z1, Z2), collapsed)
        result = verify_update(genesis_srs, collapsed, proof, rho)
        assert not result
        assert result.reason == FailureReason.INVALID_POINT

    def test_identity_public_key(self, genesis_srs, first_update, rho):
        new_srs, _ = first_update
        proof = UpdateProof(PublicKey(Z1, Z2), new_srs)
        assert verify_update(genesis_srs, new_srs, proof, rho).reason == FailureReason.INVALID_POINT

    def test_malformed_public_key(self, genesis_srs, first_update, rho):
        new_srs, _ = first_update
        proof = UpdateProof(PublicKey(G2, G1), new_srs)
        assert verify_update(genesis_srs, new_srs, proof, rho).reason == FailureReason.INVALID_POINT

    def test_generator_changed(self, genesis_srs, first_update, rho):
        new_srs, proof = first_update
        moved = tampered_g1(new_srs, 0, ec_mul(G1, 2))
        result = verify_update(genesis_srs, moved, UpdateProof(proof.public_key, moved), rho)
        assert result.reason == FailureReason.GENERATOR_CHANGED

    def test_zero_randomness(self, genesis_srs, first_update):
        new_srs, proof = first_update
        result = verify_update(genesis_srs, new_srs, proof, 0)
        assert result.reason == FailureReason.INVALID_RANDOMNESS

    def test_proof_of_knowledge_mismatch(self, genesis_srs, first_update, rho):
        """g1_commit and g2_commit must hide the same secret."""
        new_srs, proof = first_update
        mixed = PublicKey(proof.public_key.g1_commit, ec_mul(G2, 1234))
        result = verify_update(genesis_srs, new_srs, UpdateProof(mixed, new_srs), rho)
        assert result.reason == FailureReason.PROOF_OF_KNOWLEDGE

    def test_wrong_secret_for_transition(self, genesis_srs, first_update, rho):
        """A valid key pair that did not produce this SRS is rejected."""
        new_srs, _ = first_update
        other = PrivateKey.from_int(0xC0FFEE).to_public()
        result = verify_update(genesis_srs, new_srs, UpdateProof(other, new_srs), rho)
        assert result.reason == FailureReason.FIRST_POWER_TRANSITION

    def test_proof_against_wrong_previous_srs(self, genesis_srs, first_update, rho):
        """A proof built on SRS_1 does not justify genesis → SRS_2."""
        srs_1, _ = first_update
        srs_2, proof_2 = update(srs_1, PrivateKey.from_int(0xBEEF))
        result = verify_update(genesis_srs, srs_2, proof_2, rho)
        assert result.reason == FailureReason.FIRST_POWER_TRANSITION

    def test_broken_structure(self, genesis_srs, first_update, rho):
        """Changing a higher power keeps PoK and tau·G1 intact but breaks the ratio."""
        new_srs, proof = first_update
        broken = tampered_g1(new_srs, 3, ec_mul(G1, 7))
        result = verify_update(genesis_srs, broken, UpdateProof(proof.public_key, broken), rho)
        assert result.reason == FailureReason.STRUCTURE


class TestVerificationResult:

    def test_bool(self):
        assert VerificationResult.ok()
        assert not VerificationResult.failure(FailureReason.STRUCTURE)

    def test_compare_with_bool(self):
        assert VerificationResult.ok() == True  # noqa: E712
        assert VerificationResult.failure(FailureReason.STRUCTURE) == False  # noqa: E712

    def test_at_step(self):
        result = VerificationResult.failure(FailureReason.STRUCTURE).at_step(2)
        assert result.failed_step == 2
        assert result.reason == FailureReason.STRUCTURE
        assert result == VerificationResult(False, FailureReason.STRUCTURE, 2)

    @pytest.mark.parametrize("reason", list(FailureReason))
    def test_repr_names_reason(self, reason):
        assert reason.value in repr(VerificationResult.failure(reason))
