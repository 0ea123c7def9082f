"""Local session adapter - a trivial credential gate persisted to disk."""

import json
import logging
import uuid
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SESSION_FILENAME = "user.json"
MIN_PASSWORD_LENGTH = 4


@dataclass
class User:
    id: str
    name: str
    email: str


class LocalAuth:
    """
    Session stored as a small JSON file.

    Implements AuthProvider protocol.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.data_dir / SESSION_FILENAME

    def login(self, email: str, password: str) -> bool:
        """Accept any non-empty email with a password of at least four characters."""
        if not email or not password or len(password) < MIN_PASSWORD_LENGTH:
            return False
        user = User(id=uuid.uuid4().hex, name=email.split("@")[0], email=email)
        self.path.write_text(json.dumps(asdict(user)))
        self.path.chmod(0o600)
        logger.info(f"Signed in as {email}")
        return True

    def logout(self) -> None:
        self.path.unlink(missing_ok=True)

    def current_user(self) -> User | None:
        """The signed-in user, or None if there is no valid session."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text())
            return User(id=data["id"], name=data["name"], email=data["email"])
        except (json.JSONDecodeError, KeyError, TypeError):
            return None
