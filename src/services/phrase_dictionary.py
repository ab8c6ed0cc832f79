import json
import logging
import unicodedata
from dataclasses import dataclass
from pathlib import Path

from ..models.live import RiskLevel

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Built-in phrase tables (English and Arabic share one list per tier)
# ---------------------------------------------------------------------------

HIGH_RISK_PHRASES: tuple[str, ...] = (
    # payment and transfer demands
    "send money",
    "wire transfer",
    "transfer the money",
    "gift card",
    "western union",
    "moneygram",
    "bitcoin",
    "crypto wallet",
    "pay the fine",
    # credentials and banking details
    "bank account number",
    "routing number",
    "credit card number",
    "social security number",
    "cvv",
    "one-time password",
    "verification code",
    "pin code",
    # device takeover
    "remote access",
    "anydesk",
    "teamviewer",
    # threats
    "arrest warrant",
    "legal action against you",
    "أرسل المال",
    "ارسل المال",
    "تحويل الأموال",
    "حوالة مالية",
    "حول المبلغ",
    "بطاقة هدايا",
    "رقم الحساب البنكي",
    "رقم البطاقة",
    "الرقم السري",
    "رمز التحقق",
    "كلمة المرور",
    "أمر اعتقال",
)

MEDIUM_RISK_PHRASES: tuple[str, ...] = (
    "click this link",
    "confirm your identity",
    "verify your account",
    "update your details",
    "account has been suspended",
    "account will be blocked",
    "unusual activity",
    "security alert",
    "you have won",
    "you've won",
    "claim your prize",
    "lottery",
    "limited time offer",
    "act now",
    "tax refund",
    "customs fee",
    "delivery fee",
    "do not tell anyone",
    "keep this confidential",
    "اضغط على الرابط",
    "تأكيد هويتك",
    "تحديث بياناتك",
    "تم إيقاف حسابك",
    "نشاط مشبوه",
    "لقد ربحت",
    "استلم جائزتك",
    "رسوم جمركية",
    "لا تخبر أحدا",
)

LOW_RISK_PHRASES: tuple[str, ...] = (
    "call back",
    "urgent",
    "immediately",
    "as soon as possible",
    "right away",
    "final notice",
    "last chance",
    "don't hang up",
    "do not hang up",
    "stay on the line",
    "dear customer",
    "congratulations",
    "special offer",
    "free gift",
    "عاجل",
    "فورا",
    "اتصل بنا",
    "عميلنا العزيز",
    "مبروك",
    "عرض خاص",
    "لا تغلق الخط",
)


def normalize_text(text: str) -> str:
    """NFKC-normalize and lower-case. Arabic script passes through unchanged."""
    return unicodedata.normalize("NFKC", text).lower()


def _normalize_tier(name: str, phrases) -> tuple[str, ...]:
    if isinstance(phrases, str):
        raise ValueError(f"Phrase tier '{name}' must be a list of strings, not a string.")

    seen: set[str] = set()
    normalized: list[str] = []
    for phrase in phrases:
        if not isinstance(phrase, str):
            raise ValueError(f"Phrase tier '{name}' contains a non-string entry: {phrase!r}")
        value = normalize_text(phrase).strip()
        if value and value not in seen:
            seen.add(value)
            normalized.append(value)

    if not normalized:
        raise ValueError(f"Phrase tier '{name}' must contain at least one phrase.")
    return tuple(normalized)


@dataclass(frozen=True)
class PhraseDictionary:
    high: tuple[str, ...]
    medium: tuple[str, ...]
    low: tuple[str, ...]

    def __post_init__(self) -> None:
        # frozen: normalized tiers are written once, here
        for name in ("high", "medium", "low"):
            object.__setattr__(self, name, _normalize_tier(name, getattr(self, name)))

    def tier(self, level: RiskLevel) -> tuple[str, ...]:
        return getattr(self, level.value)

    def as_dict(self) -> dict[str, list[str]]:
        return {"high": list(self.high), "medium": list(self.medium), "low": list(self.low)}


def default_phrase_dictionary() -> PhraseDictionary:
    return PhraseDictionary(
        high=HIGH_RISK_PHRASES,
        medium=MEDIUM_RISK_PHRASES,
        low=LOW_RISK_PHRASES,
    )


def load_phrase_dictionary(path: str | Path) -> PhraseDictionary:
    """
    Load phrase tables from a JSON file shaped like
    {"high": [...], "medium": [...], "low": [...]}.
    Raises ValueError if the file is unreadable, malformed, or a tier is missing or empty.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Cannot read phrase dictionary {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Phrase dictionary {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Phrase dictionary {path} must be a JSON object keyed by tier.")

    missing = [name for name in ("high", "medium", "low") if name not in data]
    if missing:
        raise ValueError(f"Phrase dictionary {path} is missing tiers: {', '.join(missing)}")

    dictionary = PhraseDictionary(high=data["high"], medium=data["medium"], low=data["low"])
    logger.info(
        "Loaded phrase dictionary from %s (%d high, %d medium, %d low).",
        path,
        len(dictionary.high),
        len(dictionary.medium),
        len(dictionary.low),
    )
    return dictionary
