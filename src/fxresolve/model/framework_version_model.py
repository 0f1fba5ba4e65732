from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from packaging.version import InvalidVersion, Version

NET_CORE_APP = ".NETCoreApp"
NET_FRAMEWORK = ".NETFramework"
NET_STANDARD = ".NETStandard"

_SHORT_IDENTIFIERS = {
    "netcoreapp": NET_CORE_APP,
    "netstandard": NET_STANDARD,
}

_LONG_FORM_RE = re.compile(
    r"^(?P<identifier>[^,]+),\s*Version=(?P<version>v?[0-9.]+)(?:,\s*Profile=(?P<profile>.+))?$",
    re.IGNORECASE)

_SHORT_FORM_RE = re.compile(
    r"^(?P<framework>[a-z]+?)(?P<version>[0-9][0-9.]*)(?:-(?P<platform>[a-z][a-z0-9.]*))?$",
    re.IGNORECASE)


@dataclass(slots=True, frozen=True, order=True)
class FrameworkVersion:
    """
    A numeric framework version with two to four components
    (major.minor[.build[.revision]]).

    Components that were not given stay absent, so ``6.0`` and ``6.0.0.0``
    are different values until normalized.
    """
    parts: tuple[int, ...]

    def __post_init__(self):
        if not 2 <= len(self.parts) <= 4:
            raise ValueError(f"A framework version needs 2 to 4 components, got {self.parts!r}")
        if any(p < 0 for p in self.parts):
            raise ValueError(f"Framework version components must be non-negative: {self.parts!r}")

    @classmethod
    def parse(cls, text: str) -> FrameworkVersion:
        """
        Parse a version string such as ``6.0``, ``v4.7.2`` or ``6.0.0.0``.

        Args:
            text (str): The version string. A leading ``v`` is accepted.

        Returns:
            FrameworkVersion: The parsed version, keeping the number of
            components that were given.

        Raises:
            ValueError: If the text is not a plain numeric version with two to
                four components.
        """
        raw = (text or "").strip()
        try:
            parsed = Version(raw)
        except InvalidVersion:
            raise ValueError(f"Invalid framework version: {text!r}") from None
        if parsed.is_prerelease or parsed.is_postrelease or parsed.local or parsed.epoch:
            raise ValueError(f"Framework versions must be purely numeric: {text!r}")
        return cls(tuple(parsed.release))

    @property
    def major(self) -> int:
        return self.parts[0]

    @property
    def minor(self) -> int:
        return self.parts[1]

    def padded(self, width: int = 4) -> FrameworkVersion:
        return FrameworkVersion(self.parts + (0,) * (width - len(self.parts)))

    def normalized(self) -> FrameworkVersion:
        """
        Drop a zero revision, and then a zero build as well, so that
        ``6.0.0.0`` and ``6.0`` compare equal. A three-part version has no
        revision and is returned unchanged.
        """
        parts = self.parts
        if len(parts) == 4 and parts[3] == 0:
            parts = parts[:3]
            if parts[2] == 0:
                parts = parts[:2]
        return FrameworkVersion(parts)

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.parts)


def normalize_version(version: FrameworkVersion | str) -> FrameworkVersion:
    if isinstance(version, str):
        version = FrameworkVersion.parse(version)
    return version.normalized()


def _short_version(digits: str) -> FrameworkVersion:
    # "472" -> 4.7.2, "48" -> 4.8, "6.0" -> 6.0
    if "." in digits:
        return FrameworkVersion.parse(digits)
    if len(digits) == 1:
        return FrameworkVersion((int(digits), 0))
    return FrameworkVersion(tuple(int(d) for d in digits[:4]))


@dataclass(slots=True, frozen=True)
class TargetFramework:
    """
    A parsed target framework: identifier (e.g. ``.NETCoreApp``), a version
    padded to four components and an optional platform suffix
    (``windows`` in ``net6.0-windows``).
    """
    identifier: str
    version: FrameworkVersion
    platform: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> TargetFramework:
        """
        Parse a target framework moniker or its long form.

        Accepted inputs include ``net8.0``, ``net6.0-windows``,
        ``netcoreapp3.1``, ``netstandard2.0``, ``net48`` and
        ``.NETCoreApp,Version=v6.0``.

        Args:
            text (str): The framework text to parse.

        Returns:
            TargetFramework: The parsed framework with a four-part version.

        Raises:
            ValueError: If the framework text is not recognized.
        """
        raw = (text or "").strip()
        m = _LONG_FORM_RE.match(raw)
        if m:
            version_text = m.group("version")
            # "v6" means 6.0
            if "." not in version_text:
                version_text += ".0"
            return cls(
                identifier=m.group("identifier").strip(),
                version=FrameworkVersion.parse(version_text).padded())

        m = _SHORT_FORM_RE.match(raw)
        if not m:
            raise ValueError(f"Unrecognized target framework: {text!r}")

        framework = m.group("framework").lower()
        version = _short_version(m.group("version"))
        platform = m.group("platform")
        if framework == "net":
            identifier = NET_CORE_APP if version.major >= 5 else NET_FRAMEWORK
        elif framework in _SHORT_IDENTIFIERS:
            identifier = _SHORT_IDENTIFIERS[framework]
        else:
            raise ValueError(f"Unrecognized target framework: {text!r}")
        if platform is not None and identifier != NET_CORE_APP:
            raise ValueError(f"Platform suffix is only valid on .NET 5 and later: {text!r}")
        return cls(identifier=identifier, version=version.padded(), platform=platform)

    def matches(self, identifier: str, version: FrameworkVersion | str) -> bool:
        """Case-insensitive identifier match plus normalized version equality."""
        return (self.identifier.casefold() == (identifier or "").casefold()
                and self.version.normalized() == normalize_version(version))

    def to_mapping(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "version": str(self.version),
            "platform": self.platform,
        }

    def __str__(self) -> str:
        return f"{self.identifier},Version=v{self.version.normalized()}"
