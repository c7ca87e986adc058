import random
import string
from datetime import datetime, timezone

ALNUM = string.ascii_uppercase + string.digits


def generate_receipt(prefix="REG"):
    ts = datetime.now(timezone.utc).strftime("%m%d%H%M%S")  # 10 chars
    rand = "".join(random.choices(ALNUM, k=6))
    base = f"{prefix}{ts}{rand}"
    # keep the last 20 chars, well inside every provider's receipt limit
    return base[-20:]
