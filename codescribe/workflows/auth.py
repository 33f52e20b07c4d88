"""Authentication signal probes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from ..models import FileAnalysis
from .base import Extractor
from .models import AuthFlow

# (kind, label, substrings); each probe is independent and matched on lowercased content.
AUTH_PROBES: Sequence[Tuple[str, str, Tuple[str, ...]]] = (
    ("method", "JWT", ("jwt", "jsonwebtoken")),
    ("method", "Passport.js", ("passport",)),
    ("method", "OAuth 2.0", ("oauth",)),
    ("method", "Session-based", ("session",)),
    ("method", "Cookie-based", ("cookie",)),
    ("provider", "Google", ("googleprovider", "google-auth", "accounts.google.com")),
    ("provider", "GitHub", ("githubprovider", "passport-github")),
    ("provider", "Auth0", ("auth0",)),
    ("provider", "Firebase Auth", ("firebase/auth",)),
    ("provider", "Supabase Auth", ("supabase.auth",)),
    ("provider", "NextAuth.js", ("next-auth",)),
    ("flow", "Login Flow", ("login", "signin")),
    ("flow", "Registration Flow", ("register", "signup")),
    ("flow", "Logout Flow", ("logout", "signout")),
)


@dataclass(frozen=True)
class AuthSignal:
    kind: str
    label: str
    file: str


class AuthSignalExtractor(Extractor):
    """Every file is probed; the analyzer folds the signals into one AuthFlow."""

    name = "auth"

    def supports(self, file: FileAnalysis) -> bool:
        return bool(file.content)

    def extract(self, file: FileAnalysis) -> List[AuthSignal]:
        content = file.content.lower()
        return [
            AuthSignal(kind=kind, label=label, file=file.path)
            for kind, label, needles in AUTH_PROBES
            if any(needle in content for needle in needles)
        ]


def fold_signals(signals: Iterable[AuthSignal]) -> AuthFlow:
    methods, providers, flows, files = set(), set(), set(), set()
    buckets = {"method": methods, "provider": providers, "flow": flows}
    for signal in signals:
        buckets[signal.kind].add(signal.label)
        files.add(signal.file)
    return AuthFlow(
        methods=sorted(methods),
        providers=sorted(providers),
        flows=sorted(flows),
        files=sorted(files),
    )


__all__ = ["AUTH_PROBES", "AuthSignal", "AuthSignalExtractor", "fold_signals"]
