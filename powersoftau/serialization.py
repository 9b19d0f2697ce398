"""
SRS / UpdateProof 직렬화 및 역직렬화
======================================

기여자, 코디네이터, 검증자 사이에서 값을 주고받기 위한 인코딩.

**점 인코딩**: ZCash BLS12-381 압축 형식 (py_ecc.bls.point_compression)
  - G1: 48바이트, G2: 96바이트
  - 상위 3비트 플래그: 압축(c), 무한원점(b), y 부호(a)

**바이트 레이아웃**:
  SRS         = g1[0] ‖ ... ‖ g1[n-1] ‖ g2[0] ‖ ... ‖ g2[m-1]
  PublicKey   = g1_commit ‖ g2_commit                      (144바이트)
  UpdateProof = PublicKey ‖ SRS

**JSON 형식**: 각 점은 "0x" 접두사가 붙은 hex 문자열이다.
  TinyDB 저장(powersoftau.store)과 서브 세레모니 묶음에서 사용한다.

역직렬화는 길이와 점 인코딩을 먼저 확인하고 (DeserializationError),
그 다음 부분군/항등원/생성자 검증을 수행한다 (InvalidPointError).
"""

from py_ecc import optimized_bls12_381 as bls12
from py_ecc.bls.point_compression import (
    compress_G1, decompress_G1, compress_G2, decompress_G2,
)

from powersoftau.errors import DeserializationError, InvalidPointError
from powersoftau.field import is_identity, in_subgroup
from powersoftau.keypair import PublicKey
from powersoftau.srs import SRS
from powersoftau.update_proof import UpdateProof

G1_SERIALIZED_SIZE = 48
G2_SERIALIZED_SIZE = 96
PUBLIC_KEY_SERIALIZED_SIZE = G1_SERIALIZED_SIZE + G2_SERIALIZED_SIZE

# 압축 인코딩에서 x 좌표가 차지하는 하위 381비트
POW_2_381 = 2 ** 381


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → 48 bytes"""
    return compress_G1(point).to_bytes(G1_SERIALIZED_SIZE, "big")


def deserialize_g1(data):
    """48 bytes → G1 point (곡선 위의 점인지만 확인)"""
    if len(data) != G1_SERIALIZED_SIZE:
        raise DeserializationError(
            f"G1 점은 {G1_SERIALIZED_SIZE}바이트여야 합니다: {len(data)}"
        )
    z = int.from_bytes(data, "big")
    if z >> 382 == 0b10 and z % POW_2_381 == 0:
        # x = 0, 무한원점 아님: py_ecc는 이 인코딩을 무한원점으로 취급하므로 직접 푼다
        return _decompress_g1_zero_x(z)
    try:
        return decompress_G1(z)
    except ValueError as exc:
        raise DeserializationError(f"잘못된 G1 점 인코딩: {exc}") from exc


def _decompress_g1_zero_x(z):
    """x = 0 인 G1 점 (0, ±2). y² = 0³ + 4 의 두 해 중 a 플래그로 고른다."""
    q = bls12.field_modulus
    a_flag = (z >> 381) & 1
    y = 2
    if (y * 2) // q != a_flag:
        y = q - y
    return (bls12.FQ(0), bls12.FQ(y), bls12.FQ(1))


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → 96 bytes (x의 허수부 c1 다음 실수부 c0)"""
    z1, z2 = compress_G2(point)
    return z1.to_bytes(48, "big") + z2.to_bytes(48, "big")


def deserialize_g2(data):
    """96 bytes → G2 point (곡선 위의 점인지만 확인)"""
    if len(data) != G2_SERIALIZED_SIZE:
        raise DeserializationError(
            f"G2 점은 {G2_SERIALIZED_SIZE}바이트여야 합니다: {len(data)}"
        )
    z1 = int.from_bytes(data[:48], "big")
    z2 = int.from_bytes(data[48:], "big")
    try:
        return decompress_G2((z1, z2))
    except ValueError as exc:
        raise DeserializationError(f"잘못된 G2 점 인코딩: {exc}") from exc


# ─── hex ───

def g1_to_hex(point):
    return "0x" + serialize_g1(point).hex()


def g2_to_hex(point):
    return "0x" + serialize_g2(point).hex()


def hex_to_g1(hex_str):
    return deserialize_g1(decode_hex(hex_str))


def hex_to_g2(hex_str):
    return deserialize_g2(decode_hex(hex_str))


def decode_hex(hex_str):
    if not isinstance(hex_str, str) or not hex_str.startswith("0x"):
        raise DeserializationError(f"'0x'로 시작하는 hex 문자열이어야 합니다: {hex_str!r}")
    try:
        return bytes.fromhex(hex_str[2:])
    except ValueError as exc:
        raise DeserializationError(f"잘못된 hex 문자열: {hex_str!r}") from exc


# ─── SRS ───

def srs_size(parameters):
    """파라미터에 대한 SRS 바이트 길이."""
    return (parameters.num_g1_elements_needed * G1_SERIALIZED_SIZE
            + parameters.num_g2_elements_needed * G2_SERIALIZED_SIZE)


def serialize_srs(srs):
    """SRS → bytes"""
    return (b"".join(serialize_g1(p) for p in srs.g1_elements)
            + b"".join(serialize_g2(p) for p in srs.g2_elements))


def deserialize_srs(raw, parameters):
    """bytes → 검증된 SRS.

    정확히 num_g1 + num_g2 개의 점을 파싱한 뒤 srs.validate()를 수행한다.

    Args:
        raw: 바이트열
        parameters: Parameters

    Returns:
        SRS

    Raises:
        DeserializationError: 길이나 점 인코딩이 잘못되었을 때
        InvalidPointError: 항등원, 부분군 밖의 점, 바뀐 생성자가 있을 때
    """
    raw = bytes(raw)
    expected = srs_size(parameters)
    if len(raw) != expected:
        raise DeserializationError(f"SRS는 {expected}바이트여야 합니다: {len(raw)}")

    g1_end = parameters.num_g1_elements_needed * G1_SERIALIZED_SIZE
    g1_elements = [
        deserialize_g1(raw[i:i + G1_SERIALIZED_SIZE])
        for i in range(0, g1_end, G1_SERIALIZED_SIZE)
    ]
    g2_elements = [
        deserialize_g2(raw[i:i + G2_SERIALIZED_SIZE])
        for i in range(g1_end, expected, G2_SERIALIZED_SIZE)
    ]

    srs = SRS(g1_elements, g2_elements)
    srs.validate()
    return srs


def srs_to_json(srs):
    """SRS → dict"""
    return {
        "g1_elements": [g1_to_hex(p) for p in srs.g1_elements],
        "g2_elements": [g2_to_hex(p) for p in srs.g2_elements],
    }


def srs_from_json(data, parameters):
    """dict → 검증된 SRS"""
    try:
        g1_hex = data["g1_elements"]
        g2_hex = data["g2_elements"]
    except (KeyError, TypeError) as exc:
        raise DeserializationError("SRS JSON에 g1_elements/g2_elements가 없습니다") from exc

    if len(g1_hex) != parameters.num_g1_elements_needed:
        raise DeserializationError(
            f"G1 원소 수가 {parameters.num_g1_elements_needed}이어야 합니다: {len(g1_hex)}"
        )
    if len(g2_hex) != parameters.num_g2_elements_needed:
        raise DeserializationError(
            f"G2 원소 수가 {parameters.num_g2_elements_needed}이어야 합니다: {len(g2_hex)}"
        )

    srs = SRS([hex_to_g1(h) for h in g1_hex], [hex_to_g2(h) for h in g2_hex])
    srs.validate()
    return srs


# ─── PublicKey ───

def serialize_public_key(public_key):
    """PublicKey → 144 bytes"""
    return serialize_g1(public_key.g1_commit) + serialize_g2(public_key.g2_commit)


def deserialize_public_key(data):
    """144 bytes → 검증된 PublicKey"""
    data = bytes(data)
    if len(data) != PUBLIC_KEY_SERIALIZED_SIZE:
        raise DeserializationError(
            f"공개키는 {PUBLIC_KEY_SERIALIZED_SIZE}바이트여야 합니다: {len(data)}"
        )
    public_key = PublicKey(
        deserialize_g1(data[:G1_SERIALIZED_SIZE]),
        deserialize_g2(data[G1_SERIALIZED_SIZE:]),
    )
    _validate_public_key(public_key)
    return public_key


def public_key_to_json(public_key):
    return {
        "g1_commit": g1_to_hex(public_key.g1_commit),
        "g2_commit": g2_to_hex(public_key.g2_commit),
    }


def public_key_from_json(data):
    try:
        public_key = PublicKey(hex_to_g1(data["g1_commit"]), hex_to_g2(data["g2_commit"]))
    except (KeyError, TypeError) as exc:
        raise DeserializationError("공개키 JSON에 g1_commit/g2_commit이 없습니다") from exc
    _validate_public_key(public_key)
    return public_key


def _validate_public_key(public_key):
    for group, point in (("G1", public_key.g1_commit), ("G2", public_key.g2_commit)):
        if is_identity(point):
            raise InvalidPointError(group, None, "공개키가 항등원입니다")
        if not in_subgroup(point):
            raise InvalidPointError(group, None, "공개키가 소수 위수 부분군에 속하지 않습니다")


# ─── UpdateProof ───

def serialize_update_proof(proof):
    """UpdateProof → bytes (공개키 다음 SRS 스냅샷)"""
    return serialize_public_key(proof.public_key) + serialize_srs(proof.resulting_srs)


def deserialize_update_proof(raw, parameters):
    """bytes → UpdateProof

    Raises:
        DeserializationError: 길이나 점 인코딩이 잘못되었을 때
        InvalidPointError: 공개키나 SRS 스냅샷의 점이 잘못되었을 때
    """
    raw = bytes(raw)
    expected = PUBLIC_KEY_SERIALIZED_SIZE + srs_size(parameters)
    if len(raw) != expected:
        raise DeserializationError(f"UpdateProof는 {expected}바이트여야 합니다: {len(raw)}")
    public_key = deserialize_public_key(raw[:PUBLIC_KEY_SERIALIZED_SIZE])
    srs = deserialize_srs(raw[PUBLIC_KEY_SERIALIZED_SIZE:], parameters)
    return UpdateProof(public_key, srs)


def update_proof_to_json(proof):
    """UpdateProof → dict"""
    return {
        "public_key": public_key_to_json(proof.public_key),
        "resulting_srs": srs_to_json(proof.resulting_srs),
    }


def update_proof_from_json(data, parameters):
    """dict → UpdateProof"""
    try:
        public_key_data = data["public_key"]
        srs_data = data["resulting_srs"]
    except (KeyError, TypeError) as exc:
        raise DeserializationError("UpdateProof JSON에 public_key/resulting_srs가 없습니다") from exc
    return UpdateProof(public_key_from_json(public_key_data), srs_from_json(srs_data, parameters))
