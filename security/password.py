import bcrypt

def _to_secret(plain_password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return plain_password.encode("utf-8")[:72]

def hash_password(plain_password: str) -> str:
    if not isinstance(plain_password, str) or len(plain_password) == 0:
        raise ValueError("Password must be a non-empty string")

    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(_to_secret(plain_password), salt).decode("utf-8")

def verify_password(plain_password: str, password_hash: str) -> bool:
    if not isinstance(plain_password, str) or not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_to_secret(plain_password), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
