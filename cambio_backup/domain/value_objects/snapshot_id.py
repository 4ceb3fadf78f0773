"""
Value Object pour l'identifiant d'un backup.
"""

import re
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timezone

from cambio_backup.domain.exceptions import SnapshotValidationError

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 8
_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{6}Z_[0-9a-z]{8}$")


@dataclass(frozen=True, slots=True)
class SnapshotId:
    """
    Identifiant unique et triable chronologiquement d'un backup.

    Format: horodatage UTC (':' et '.' remplaces par '-') suivi
    d'un suffixe aleatoire base36 de 8 caracteres.

    Attributes:
        value: Valeur de l'identifiant.

    Example:
        >>> SnapshotId.generate(datetime(2026, 10, 17, 2, tzinfo=timezone.utc)).value[:27]
        '2026-10-17T02-00-00-000000Z'
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not str(self.value).strip():
            raise SnapshotValidationError("Identifiant de backup vide")

    @classmethod
    def generate(cls, now: datetime | None = None) -> "SnapshotId":
        """
        Genere un nouvel identifiant.

        Args:
            now: Instant de reference (defaut: maintenant, UTC).

        Returns:
            SnapshotId unique.
        """
        now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        stamp = now.strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
        return cls(f"{stamp}_{suffix}")

    @property
    def is_generated_format(self) -> bool:
        """True si l'identifiant suit le format genere par ce moteur."""
        return bool(_PATTERN.match(self.value))

    @property
    def filename(self) -> str:
        """Nom du fichier de backup associe."""
        return f"backup_{self.value}.json"

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: "SnapshotId") -> bool:
        return self.value < other.value
