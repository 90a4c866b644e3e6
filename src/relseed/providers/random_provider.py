"""Seedable source of primitive values and Faker-backed semantic strings."""

from __future__ import annotations

import hashlib
import random
import string
import uuid
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence, TypeVar

from faker import Faker

T = TypeVar("T")

ALPHANUMERIC = string.ascii_letters + string.digits

DEFAULT_STRING_LENGTH = 50
DEFAULT_BYTE_ARRAY_LENGTH = 16
MIN_DATETIME = datetime(2000, 1, 1)
MAX_TIMESPAN = timedelta(days=365)

# Offsets are whole quarter hours between -12:00 and +14:00
_OFFSET_STEP = timedelta(minutes=15)
_MIN_OFFSET_STEPS = -48
_MAX_OFFSET_STEPS = 56


def stable_hash(key: str) -> int:
    """
    Hash a string to an integer that is identical across processes.

    Python's built-in ``hash()`` is salted per interpreter, so it cannot
    seed reproducible values.
    """
    return int.from_bytes(hashlib.md5(key.encode("utf-8")).digest()[:8], "big")


def _ordered(low, high):
    return (high, low) if low > high else (low, high)


class RandomDataProvider:
    """
    Generate primitive values for seed records.

    All randomness comes from one ``random.Random`` and one ``Faker``
    instance, both seeded from ``seed``. Two providers created with the same
    seed produce the same sequence of values.

    Args:
        seed: Random seed (None = different values every run)
        locale: Faker locale used for names, addresses and similar strings
        now: Upper bound for generated dates (defaults to the start of today)
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        locale: str = "en_US",
        now: Optional[datetime] = None,
    ):
        self.seed = seed
        self._random = random.Random(seed)
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
        # Start of today, so seeded runs agree throughout the day
        self.now = (now or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)

    # Numbers

    def should_generate_null(self, probability: float = 0.1) -> bool:
        """Draw a null outcome with the given probability."""
        return self._random.random() < probability

    def random_int(self, minimum: int, maximum: int) -> int:
        """Random integer in [minimum, maximum] (bounds may be given reversed)."""
        low, high = _ordered(minimum, maximum)
        return self._random.randint(low, high)

    def random_int32(self, minimum: Optional[float] = None, maximum: Optional[float] = None) -> int:
        return self.random_int(int(minimum if minimum is not None else 1),
                               int(maximum if maximum is not None else 1000))

    def random_int64(self, minimum: Optional[float] = None, maximum: Optional[float] = None) -> int:
        return self.random_int(int(minimum if minimum is not None else 1),
                               int(maximum if maximum is not None else 1_000_000))

    def random_int16(self, minimum: Optional[float] = None, maximum: Optional[float] = None) -> int:
        return self.random_int(int(minimum if minimum is not None else 1),
                               int(maximum if maximum is not None else 1000))

    def random_byte(self, minimum: Optional[float] = None, maximum: Optional[float] = None) -> int:
        low = max(0, int(minimum if minimum is not None else 0))
        high = min(255, int(maximum if maximum is not None else 255))
        return self.random_int(low, high)

    def random_double(
        self, minimum: Optional[float] = None, maximum: Optional[float] = None
    ) -> float:
        """Random float in [minimum, maximum), defaulting to [0, 1000)."""
        low, high = _ordered(
            float(minimum if minimum is not None else 0.0),
            float(maximum if maximum is not None else 1000.0),
        )
        return low + self._random.random() * (high - low)

    def random_single(
        self, minimum: Optional[float] = None, maximum: Optional[float] = None
    ) -> float:
        """Random float rounded to single precision (4 decimal places)."""
        low, high = _ordered(
            float(minimum if minimum is not None else 0.0),
            float(maximum if maximum is not None else 1000.0),
        )
        value = round(low + self._random.random() * (high - low), 4)
        return min(max(value, low), high)

    def random_decimal(
        self, minimum: Optional[float] = None, maximum: Optional[float] = None
    ) -> Decimal:
        """Random decimal with two decimal places, within the bounds."""
        low, high = _ordered(
            Decimal(str(minimum if minimum is not None else 0)),
            Decimal(str(maximum if maximum is not None else 1000)),
        )
        fraction = Decimal(str(self._random.random()))
        value = (low + fraction * (high - low)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return min(max(value, low), high)

    def random_bool(self) -> bool:
        return self._random.random() < 0.5

    def choice(self, items: Sequence[T]) -> T:
        """Pick one item uniformly."""
        return self._random.choice(items)

    def sample(self, items: Sequence[T], count: int) -> list[T]:
        """Pick ``count`` distinct items (without replacement)."""
        return self._random.sample(list(items), min(count, len(items)))

    # Dates and times

    def random_datetime(
        self, minimum: Optional[datetime] = None, maximum: Optional[datetime] = None
    ) -> datetime:
        """Random naive datetime with second precision, 2000-01-01 to now by default."""
        low, high = _ordered(minimum or MIN_DATETIME, maximum or self.now)
        span = int((high - low).total_seconds())
        return low + timedelta(seconds=self._random.randint(0, max(0, span)))

    def random_datetimeoffset(self) -> datetime:
        """Random aware datetime whose UTC offset is a multiple of 15 minutes."""
        local = self.random_datetime()
        steps = self._random.randint(_MIN_OFFSET_STEPS, _MAX_OFFSET_STEPS)
        return local.replace(tzinfo=timezone(_OFFSET_STEP * steps))

    def random_timespan(
        self, minimum: Optional[timedelta] = None, maximum: Optional[timedelta] = None
    ) -> timedelta:
        """Random duration with second precision, 0 to 365 days by default."""
        low, high = _ordered(minimum or timedelta(0), maximum or MAX_TIMESPAN)
        span = int((high - low).total_seconds())
        return low + timedelta(seconds=self._random.randint(0, max(0, span)))

    # Identifiers and binary

    def random_guid(self) -> uuid.UUID:
        """Random version-4 UUID drawn from the seeded source."""
        return uuid.UUID(int=self._random.getrandbits(128), version=4)

    def random_char(self) -> str:
        """Random printable ASCII character."""
        return chr(self._random.randint(32, 126))

    def random_bytes(self, length: Optional[int] = None) -> bytes:
        size = DEFAULT_BYTE_ARRAY_LENGTH if length is None else max(0, length)
        return bytes(self._random.getrandbits(8) for _ in range(size))

    # Strings

    def random_string(
        self,
        max_length: Optional[int] = None,
        prefix: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> str:
        """
        Generate an alphanumeric string between 30% and 100% of max_length.

        When a key is supplied (prefix and/or seed) the string is derived from
        a stable hash of ``f"{prefix}_{seed}"``, so the same property and
        record always produce the same text. Without a key the run's random
        source is used.

        Args:
            max_length: Maximum length (default 50)
            prefix: Key prefix, usually the property name
            seed: Key suffix, usually the record index

        Returns:
            Alphanumeric string of at least one character

        Example:
            >>> provider = RandomDataProvider()
            >>> provider.random_string(20, "Code", 3) == provider.random_string(20, "Code", 3)
            True
        """
        limit = max(1, max_length if max_length is not None else DEFAULT_STRING_LENGTH)
        key = prefix or ""
        if seed is not None:
            key = f"{key}_{seed}"

        source = random.Random(stable_hash(key)) if key else self._random
        length = source.randint(max(1, int(limit * 0.3)), limit)
        return "".join(source.choice(ALPHANUMERIC) for _ in range(length))

    def email(self) -> str:
        return self.fake.email()

    def first_name(self) -> str:
        return self.fake.first_name()

    def last_name(self) -> str:
        return self.fake.last_name()

    def full_name(self) -> str:
        return f"{self.fake.first_name()} {self.fake.last_name()}"

    def company_name(self) -> str:
        return self.fake.company()

    def address(self) -> str:
        """Single-line street address."""
        return self.fake.address().replace("\n", ", ")

    def phone_number(self) -> str:
        return self.fake.phone_number()

    def url(self) -> str:
        return self.fake.url()

    def username(self) -> str:
        return self.fake.user_name()

    def password(self) -> str:
        return self.fake.password(length=12)

    def job_title(self) -> str:
        return self.fake.job()

    def lorem(self, max_length: Optional[int] = None) -> str:
        """Free text no longer than max_length (default 100)."""
        limit = max_length if max_length is not None else 100
        # Faker's text() needs room for at least one short word
        text = self.fake.text(max_nb_chars=max(5, limit))
        return text[:limit]
