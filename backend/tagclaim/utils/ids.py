# backend/tagclaim/utils/ids.py
import secrets
import string

TAG_ID_ALPHABET = string.ascii_uppercase + string.digits
GENERATED_TAG_ID_LENGTH = 16


def generate_tag_id(length: int = GENERATED_TAG_ID_LENGTH) -> str:
    """Random upper-case alphanumeric tag identifier."""
    return "".join(secrets.choice(TAG_ID_ALPHABET) for _ in range(length))


def build_tag_url(base_url: str, tag_id: str) -> str:
    return f"{base_url.rstrip('/')}/{tag_id}"
