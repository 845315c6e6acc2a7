"""BOM detection with caller-supplied fallback encoding.

A byte-order mark at the start of a stream is authoritative. When no BOM is
present, the caller's :class:`EncodingHint` names the encoding to assume.
This follows the W3C HTML5 guidance: "For compatibility with deployed
content, the byte order mark is considered more authoritative than anything
else."
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple, Union

# Longest recognised BOM; detection never looks further than this
MAX_BOM_LENGTH = 3

UTF8_BOM = b"\xef\xbb\xbf"
UTF16LE_BOM = b"\xff\xfe"
UTF16BE_BOM = b"\xfe\xff"


class EncodingHint(Enum):
    """Encoding to assume when a stream carries no BOM.

    ``WINDOWS``, ``POSIX`` and ``HTML5`` are aliases naming the usual choice
    for a platform; they behave exactly like the member they alias.
    """

    UTF8 = "utf-8"
    UTF16LE = "utf-16-le"
    UTF16BE = "utf-16-be"

    WINDOWS = "utf-16-le"  # MS-Windows tools default to UTF-16LE
    POSIX = "utf-8"
    HTML5 = "utf-8"

    @property
    def codec(self) -> str:
        """Python codec name for this hint."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "EncodingHint":
        """Resolve a member, alias or codec name, ignoring case and separators.

        Args:
            name: e.g. ``"windows"``, ``"UTF16LE"``, ``"utf-16-le"``

        Returns:
            Matching EncodingHint

        Raises:
            ValueError: If the name is not one of the supported encodings
        """
        key = name.strip().upper().replace("-", "").replace("_", "")
        for member_name, member in cls.__members__.items():
            if key in (member_name, member.value.upper().replace("-", "")):
                return member
        choices = ", ".join(n.lower() for n in cls.__members__)
        raise ValueError(f"Unknown encoding hint {name!r}, expected one of: {choices}")

    @classmethod
    def resolve(cls, hint: Union["EncodingHint", str]) -> "EncodingHint":
        """Accept a member or any name :meth:`from_name` understands.

        Raises:
            ValueError: If ``hint`` is neither an EncodingHint nor a known name
        """
        if isinstance(hint, cls):
            return hint
        if isinstance(hint, str):
            return cls.from_name(hint)
        raise ValueError(f"hint must be an EncodingHint, got {type(hint).__name__}")


# Hint parameters also accept any name EncodingHint.from_name resolves
HintType = Union[EncodingHint, str]


class DetectionMethod(Enum):
    """How the encoding of a stream was decided."""
    BOM = "bom"
    HINT = "hint"


@dataclass(frozen=True)
class EncodingResult:
    """Outcome of BOM sniffing.

    Attributes:
        encoding: Python codec used for the rest of the stream
        method: Whether a BOM or the caller's hint decided the encoding
        bom: BOM bytes consumed from the stream (empty when none)
    """
    encoding: str
    method: DetectionMethod
    bom: bytes = b""

    @property
    def bom_length(self) -> int:
        return len(self.bom)

    @property
    def has_bom(self) -> bool:
        return self.method is DetectionMethod.BOM


class BOMDetector:
    """Byte Order Mark detection for UTF-8 and both UTF-16 byte orders."""

    BOM_PATTERNS: ClassVar[Dict[bytes, EncodingHint]] = {
        UTF8_BOM: EncodingHint.UTF8,
        UTF16LE_BOM: EncodingHint.UTF16LE,
        UTF16BE_BOM: EncodingHint.UTF16BE,
    }

    def detect(self, data: bytes) -> Optional[Tuple[EncodingHint, bytes]]:
        """Look for a BOM at the start of ``data``.

        Args:
            data: Leading bytes of a stream

        Returns:
            Tuple of (encoding, bom) if a BOM is present, None otherwise
        """
        if not data:
            return None

        # Longer patterns first
        for bom_bytes, encoding in sorted(
            self.BOM_PATTERNS.items(), key=lambda x: len(x[0]), reverse=True
        ):
            if data.startswith(bom_bytes):
                return encoding, bom_bytes

        return None


class EncodingDetector:
    """Decide the encoding of a stream from its first bytes and a hint."""

    def __init__(self) -> None:
        self.bom_detector = BOMDetector()

    def detect(self, prefix: bytes, hint: HintType) -> EncodingResult:
        """Apply the BOM-overrides-hint rule.

        Args:
            prefix: First bytes of the stream, at most MAX_BOM_LENGTH are used
            hint: Encoding to assume when there is no BOM, or its name

        Returns:
            EncodingResult naming the codec and any BOM to strip

        Raises:
            ValueError: If ``hint`` is not a supported encoding
        """
        hint = EncodingHint.resolve(hint)
        found = self.bom_detector.detect(prefix[:MAX_BOM_LENGTH])
        if found is None:
            # Also covers prefixes shorter than any BOM
            return EncodingResult(encoding=hint.codec, method=DetectionMethod.HINT)

        encoding, bom = found
        return EncodingResult(
            encoding=encoding.codec, method=DetectionMethod.BOM, bom=bom
        )


def detect_encoding(prefix: bytes, hint: HintType = EncodingHint.HTML5) -> EncodingResult:
    """Module-level shortcut for :meth:`EncodingDetector.detect`."""
    return EncodingDetector().detect(prefix, hint)
