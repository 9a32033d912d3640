import uuid


def _short_id(prefix: str) -> str:
    return prefix + uuid.uuid4().hex[:8].upper()


def generate_request_id() -> str:
    return _short_id("REQ")


def generate_staff_id() -> str:
    return _short_id("STF")


def generate_user_id() -> str:
    return _short_id("USR")


def generate_notification_id() -> str:
    return _short_id("NTF")
