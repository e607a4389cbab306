"""Findings collected by repository checks."""

from dataclasses import dataclass, field
from typing import List

from aos_plugins.utils.console import fail_mark, warn_mark

ERROR = "error"
WARNING = "warning"


@dataclass
class Finding:
    level: str
    location: str
    message: str

    def __str__(self) -> str:
        mark = fail_mark() if self.level == ERROR else warn_mark()
        return f"{mark} {self.location}: {self.message}"


@dataclass
class CheckReport:
    findings: List[Finding] = field(default_factory=list)
    checked: int = 0

    def error(self, location: str, message: str) -> None:
        self.findings.append(Finding(ERROR, location, message))

    def warning(self, location: str, message: str) -> None:
        self.findings.append(Finding(WARNING, location, message))

    def extend(self, other: "CheckReport") -> None:
        self.findings.extend(other.findings)
        self.checked += other.checked

    @property
    def errors(self) -> List[Finding]:
        return [f for f in self.findings if f.level == ERROR]

    @property
    def warnings(self) -> List[Finding]:
        return [f for f in self.findings if f.level == WARNING]

    @property
    def exit_code(self) -> int:
        return 1 if self.errors else 0

    def print(self, title: str) -> None:
        print(f"{title}\n")
        for finding in self.findings:
            print(str(finding))
        if self.findings:
            print()
        print(f"{self.checked} checked, {len(self.errors)} error(s), {len(self.warnings)} warning(s)")
