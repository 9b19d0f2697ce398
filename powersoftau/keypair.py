"""
기여자 키 쌍: PrivateKey / PublicKey
=====================================

**PrivateKey ("toxic waste")**:
  기여 한 번에 쓰이는 비밀 스칼라 s. SRS 업데이트 한 번에 소비되고
  즉시 지워져야 한다. 직렬화, 로그 출력, 복사가 모두 금지된다.

  파이썬 int는 불변 객체라 메모리를 덮어쓸 수 없으므로
  비밀 값은 bytearray에 보관하고 소비 시 0으로 덮어쓴다.
  산술 연산 중 생기는 int 사본은 update 함수의 지역 변수로만 존재한다.

**PublicKey**:
  PublicKey = (s·G1, s·G2)
  공개해도 안전하다. 지식 증명(proof of knowledge)의 기준점이자
  세레모니에서 기여 위치를 찾을 때의 식별자로 쓰인다.

사용 예시:
    >>> sk = PrivateKey.rand()
    >>> pk = sk.to_public()
    >>> new_srs, proof = update(srs, sk)   # sk는 여기서 소비된다
"""

from powersoftau.errors import InvalidContributionError
from powersoftau.field import FR, G1, G2, CURVE_ORDER, ec_mul, ec_eq, random_scalar

# 스칼라의 바이트 길이 (CURVE_ORDER < 2^256)
SCALAR_SIZE = 32


class PrivateKey:
    """단일 사용 비밀 스칼라.

    속성:
        consumed: 이미 업데이트에 사용(소거)되었는지 여부
    """

    __slots__ = ("_secret", "_consumed")

    def __init__(self, scalar):
        if isinstance(scalar, FR):
            scalar = int(scalar)
        self._secret = bytearray((scalar % CURVE_ORDER).to_bytes(SCALAR_SIZE, "big"))
        self._consumed = False

    @classmethod
    def rand(cls):
        """secrets 모듈의 엔트로피로 0이 아닌 개인키를 만든다."""
        return cls(random_scalar())

    @classmethod
    def from_bytes(cls, data):
        """빅엔디안 바이트열을 CURVE_ORDER로 축약하여 개인키를 만든다."""
        return cls(int.from_bytes(bytes(data), "big"))

    @classmethod
    def from_int(cls, value):
        """정수로부터 개인키를 만든다 (테스트/결정론적 실행용)."""
        return cls(value)

    @property
    def consumed(self):
        return self._consumed

    def scalar(self):
        """비밀 스칼라를 FR 원소로 반환한다.

        Raises:
            InvalidContributionError: 이미 소비된 키일 때
        """
        if self._consumed:
            raise InvalidContributionError("이미 사용된 개인키입니다")
        return FR(int.from_bytes(self._secret, "big"))

    def to_public(self):
        """PublicKey = (s·G1, s·G2)를 계산한다."""
        s = self.scalar()
        return PublicKey(ec_mul(G1, s), ec_mul(G2, s))

    def erase(self):
        """비밀 바이트를 0으로 덮어쓰고 키를 소비된 상태로 만든다."""
        for i in range(len(self._secret)):
            self._secret[i] = 0
        self._consumed = True

    def __repr__(self):
        state = "consumed" if self._consumed else "live"
        return f"<PrivateKey {state}>"

    def __reduce__(self):
        raise TypeError("PrivateKey는 직렬화할 수 없습니다")

    def __copy__(self):
        raise TypeError("PrivateKey는 복사할 수 없습니다")

    def __deepcopy__(self, memo):
        raise TypeError("PrivateKey는 복사할 수 없습니다")


class PublicKey:
    """비밀 스칼라 s에 대한 공개 커밋먼트.

    속성:
        g1_commit: s·G1
        g2_commit: s·G2
    """

    __slots__ = ("g1_commit", "g2_commit")

    def __init__(self, g1_commit, g2_commit):
        self.g1_commit = g1_commit
        self.g2_commit = g2_commit

    def __eq__(self, other):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return (
            ec_eq(self.g1_commit, other.g1_commit)
            and ec_eq(self.g2_commit, other.g2_commit)
        )

    def __hash__(self):
        # 사영 좌표는 표현이 여러 개이므로 압축 인코딩으로 해싱한다
        from powersoftau.serialization import serialize_public_key
        return hash(serialize_public_key(self))

    def __repr__(self):
        from powersoftau.serialization import g2_to_hex
        return f"PublicKey(g2_commit={g2_to_hex(self.g2_commit)[:18]}...)"
