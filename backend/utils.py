import re
import secrets
import uuid
from datetime import datetime
import qrcode
from io import BytesIO
import base64

# No O/0 or I/1 so codes survive being read aloud or copied by hand
JOIN_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
JOIN_CODE_MIN_LENGTH = 6
JOIN_CODE_MAX_LENGTH = 8

VOTER_COOKIE_PREFIX = "cottage_voter_"

_JOIN_PATH_RE = re.compile(r"/r/([^/?#\s]+)", re.IGNORECASE)


def generate_uuid() -> str:
    return str(uuid.uuid4())

def generate_join_code() -> str:
    """Generates a 6-8 character room code from the unambiguous alphabet."""
    length = JOIN_CODE_MIN_LENGTH + secrets.randbelow(JOIN_CODE_MAX_LENGTH - JOIN_CODE_MIN_LENGTH + 1)
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(length))

def extract_join_code(raw: str) -> str:
    """Normalizes a bare code or a pasted room URL (``.../r/<code>``) to a join code.

    Existence is not checked here; the room lookup does that.
    """
    value = (raw or "").strip()
    if "/r/" in value.lower():
        match = _JOIN_PATH_RE.search(value)
        if match:
            value = match.group(1)
    return value.strip().upper()

def generate_admin_token() -> str:
    """Generates a secret token for admin access to one room."""
    return secrets.token_urlsafe(24)

def get_utc_now() -> datetime:
    return datetime.utcnow()

def parse_list_field(value) -> list:
    """Turns comma separated free text into an ordered list.

    An empty string is an empty list, never ``[""]``. Lists pass through with
    their items trimmed and blanks dropped.
    """
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else str(value).split(",")
    return [str(item).strip() for item in items if str(item).strip()]

def voter_cookie_name(join_code: str) -> str:
    return f"{VOTER_COOKIE_PREFIX}{join_code.upper()}"

def room_links(frontend_url: str, join_code: str) -> dict:
    base = f"{frontend_url}/r/{join_code}"
    return {
        "join_url": base,
        "results_url": f"{base}/results",
        "admin_url": f"{base}/admin",
    }

def generate_qr_code_base64(data: str) -> str:
    """Generates a QR code and returns it as a base64 encoded string."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffered = BytesIO()
    img.save(buffered, format="PNG")
    img_str = base64.b64encode(buffered.getvalue()).decode("utf-8")
    return img_str
