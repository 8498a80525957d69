"""Short random paste identifiers."""

import random
import string
import time

# 62 symbols: A-Z, a-z, 0-9
ID_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class IdGenerator:
    """
    Draws fixed-length identifiers uniformly from ID_ALPHABET.
    Uniqueness is the caller's job; see PasteRepository.write_paste.
    """

    def __init__(self, length: int = 4, rng: random.Random | None = None) -> None:
        self.length = length
        # Seeded once from the clock; shared by every repository in the process
        self.rng = rng or random.Random(time.time_ns())

    def new_id(self) -> str:
        return "".join(self.rng.choice(ID_ALPHABET) for _ in range(self.length))
