"""本地账号口令哈希。

存储格式：``pbkdf2_sha256$<迭代次数>$<salt_b64>$<digest_b64>``。
迭代次数随配置调整后，旧哈希在下次成功登录时按新参数重算（见 ``needs_rehash``）。
"""

import base64
import binascii
import hashlib
import hmac
import secrets
from dataclasses import dataclass

from sab_api.core.config import get_settings

PASSWORD_SCHEME = "pbkdf2_sha256"
_SALT_BYTES = 16


@dataclass(frozen=True)
class StoredPassword:
    """解析后的口令哈希记录。"""

    iterations: int
    salt: bytes
    digest: bytes

    @classmethod
    def parse(cls, encoded: str) -> "StoredPassword | None":
        """解析存储值；方案不符或格式损坏时返回 None。"""
        try:
            scheme, iterations_text, salt_b64, digest_b64 = encoded.split("$", 3)
            if scheme != PASSWORD_SCHEME:
                return None
            return cls(
                iterations=int(iterations_text),
                salt=base64.b64decode(salt_b64, validate=True),
                digest=base64.b64decode(digest_b64, validate=True),
            )
        except (ValueError, TypeError, binascii.Error):
            return None

    def encode(self) -> str:
        salt_b64 = base64.b64encode(self.salt).decode("ascii")
        digest_b64 = base64.b64encode(self.digest).decode("ascii")
        return f"{PASSWORD_SCHEME}${self.iterations}${salt_b64}${digest_b64}"

    def matches(self, password: str) -> bool:
        return hmac.compare_digest(_derive(password, self.salt, self.iterations), self.digest)


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str) -> str:
    """按当前配置的迭代次数生成口令哈希。"""
    iterations = get_settings().auth_password_hash_iterations
    salt = secrets.token_bytes(_SALT_BYTES)
    return StoredPassword(iterations=iterations, salt=salt, digest=_derive(password, salt, iterations)).encode()


def verify_password(password: str, password_hash: str) -> bool:
    """校验口令是否匹配，哈希格式不合法时视为不匹配。"""
    stored = StoredPassword.parse(password_hash)
    if stored is None or stored.iterations <= 0:
        return False
    return stored.matches(password)


def needs_rehash(password_hash: str) -> bool:
    """存储哈希的迭代次数与当前配置不一致时返回 True。"""
    stored = StoredPassword.parse(password_hash)
    return stored is None or stored.iterations != get_settings().auth_password_hash_iterations
