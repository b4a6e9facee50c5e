from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt ignores everything past 72 bytes
MAX_BCRYPT_BYTES = 72


def truncate_password(password: str) -> str:
    """
    Trim the password until its UTF-8 encoding fits in 72 bytes.
    """
    encoded = password.encode("utf-8")
    if len(encoded) <= MAX_BCRYPT_BYTES:
        return password
    return encoded[:MAX_BCRYPT_BYTES].decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    return pwd_context.hash(truncate_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(truncate_password(plain_password), hashed_password)
