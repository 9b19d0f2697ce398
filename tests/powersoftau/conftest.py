import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from py_ecc import optimized_bls12_381 as bls12
from py_ecc.bls.point_compression import decompress_G2

from powersoftau.field import CURVE_ORDER
from powersoftau.keypair import PrivateKey
from powersoftau.parameters import Parameters
from powersoftau.srs import SRS
from powersoftau.update import update


# ── 테스트 상수 ──
# 결정론적 비밀 값 (실제 세레모니에서는 PrivateKey.rand()만 사용)
TOXIC_A = 0x1F2E3D4C5B6A7988
TOXIC_B = 0x0123456789ABCDEF
TOXIC_C = 0x7777777777777777

# 구조 검사 결합 계수
RHO = 0x2A2A2A2A

# 압축 인코딩의 c 플래그
POW_2_383 = 2 ** 383


def low_order_g1_point():
    """곡선 위에 있지만 소수 위수 부분군 밖에 있는 G1 점을 만든다.

    y² = x³ + 4 를 만족하는 점 P를 찾은 뒤 r·P 를 계산한다.
    r·P 의 위수는 cofactor를 나누므로 부분군 검사를 통과하지 못한다.
    """
    q = bls12.field_modulus
    x = 1
    while True:
        v = (x ** 3 + 4) % q
        if pow(v, (q - 1) // 2, q) == 1:
            # q ≡ 3 (mod 4) 이므로 제곱근은 v^((q+1)/4)
            y = pow(v, (q + 1) // 4, q)
            break
        x += 1
    point = (bls12.FQ(x), bls12.FQ(y), bls12.FQ(1))
    low_order = bls12.multiply(point, CURVE_ORDER)
    assert not bls12.is_inf(low_order)
    assert bls12.is_on_curve(low_order, bls12.b)
    return low_order


@pytest.fixture(scope="session")
def small_params():
    """G1 4개, G2 2개 (KZG 형태, 빠른 테스트용)."""
    return Parameters(4, 2)


@pytest.fixture(scope="session")
def wide_params():
    """G2 원소가 2개보다 많은 파라미터."""
    return Parameters(3, 3)


@pytest.fixture(scope="session")
def genesis_srs(small_params):
    return SRS.genesis(small_params)


@pytest.fixture(scope="session")
def first_update(genesis_srs):
    """genesis에 TOXIC_A를 적용한 결과: (srs, proof)."""
    return update(genesis_srs, PrivateKey.from_int(TOXIC_A))


@pytest.fixture(scope="session")
def ceremony_chain(genesis_srs):
    """세 기여자가 차례로 기여한 세레모니.

    Returns:
        dict: srs 목록 (genesis 포함), proofs, public_keys
    """
    srs_list = [genesis_srs]
    proofs = []
    public_keys = []
    for toxic in (TOXIC_A, TOXIC_B, TOXIC_C):
        public_keys.append(PrivateKey.from_int(toxic).to_public())
        new_srs, proof = update(srs_list[-1], PrivateKey.from_int(toxic))
        srs_list.append(new_srs)
        proofs.append(proof)
    return {"srs": srs_list, "proofs": proofs, "public_keys": public_keys}


@pytest.fixture(scope="session")
def toxic_secrets():
    return TOXIC_A, TOXIC_B, TOXIC_C


@pytest.fixture(scope="session")
def rho():
    return RHO


@pytest.fixture(scope="session")
def low_order_g1():
    return low_order_g1_point()


def low_order_g2_point():
    """twist 곡선 위에 있지만 소수 위수 부분군 밖에 있는 G2 점을 만든다.

    x = k (허수부 0) 에서 압축 해제가 성공하는 첫 k를 찾고, r·P 를 계산한다.
    """
    k = 1
    while True:
        try:
            point = decompress_G2((POW_2_383, k))
            break
        except ValueError:
            k += 1
    low_order = bls12.multiply(point, CURVE_ORDER)
    assert not bls12.is_inf(low_order)
    assert bls12.is_on_curve(low_order, bls12.b2)
    return low_order


@pytest.fixture(scope="session")
def low_order_g2():
    return low_order_g2_point()
