"""Heuristic security audit of a contract project tree.

Pattern-based and best effort: findings are hints, not proofs, and a check
that cannot run is reported as skipped rather than failing the audit.
"""

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Sequence

from .exceptions import AuditCheckError

LOGGER = logging.getLogger(__name__)

SEVERITIES = ("critical", "high", "medium", "low", "info")

SECRET_PATTERNS = [
    re.compile(r"private.*key.*=.*[\"'`]0x[a-fA-F0-9]{64}[\"'`]", re.IGNORECASE),
    re.compile(r"api.*key.*=.*[\"'`][a-zA-Z0-9]{20,}[\"'`]", re.IGNORECASE),
    re.compile(r"secret.*=.*[\"'`][a-zA-Z0-9]{20,}[\"'`]", re.IGNORECASE),
    re.compile(r"password.*=.*[\"'`].{8,}[\"'`]", re.IGNORECASE),
]

SOURCE_SUFFIXES = (".js", ".ts", ".py")
EXCLUDED_DIRS = frozenset(
    {"node_modules", ".git", ".venv", "venv", "__pycache__", "artifacts", "cache"}
)

PRAGMA_PATTERN = re.compile(r"pragma solidity \^0\.8\.\d+;")
UINT256_LIMIT = 10

PYTHON_MANIFESTS = ("pyproject.toml", "requirements.txt", "setup.py")

CommandRunner = Callable[..., subprocess.CompletedProcess]


@dataclass
class IssueReport:
    """Findings bucketed by severity."""

    issues: Dict[str, List[str]] = field(
        default_factory=lambda: {severity: [] for severity in SEVERITIES}
    )

    def add(self, severity: str, finding: str) -> None:
        if severity not in self.issues:
            raise ValueError(f"Unknown severity '{severity}'")
        self.issues[severity].append(finding)

    def count(self, severity: str) -> int:
        return len(self.issues[severity])

    @property
    def has_critical(self) -> bool:
        return bool(self.issues["critical"])

    def exit_code(self) -> int:
        """1 if any critical finding exists, else 0."""
        return 1 if self.has_critical else 0


@dataclass
class CheckResult:
    """Console status of one check."""

    title: str
    skipped: bool = False
    notes: List[str] = field(default_factory=list)


@dataclass
class AuditResult:
    report: IssueReport
    checks: List[CheckResult]

    def exit_code(self) -> int:
        return self.report.exit_code()


def _iter_files(root: Path, suffixes: Sequence[str]) -> Iterator[Path]:
    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.suffix not in suffixes:
            continue
        if any(part in EXCLUDED_DIRS for part in path.relative_to(root).parts[:-1]):
            continue
        yield path


def _contract_files(root: Path) -> List[Path]:
    contracts_dir = root / "contracts"
    if not contracts_dir.is_dir():
        raise AuditCheckError(f"No contracts directory at {contracts_dir}")
    return sorted(contracts_dir.rglob("*.sol"))


def _display(root: Path, path: Path) -> str:
    return str(path.relative_to(root))


def check_hardcoded_secrets(root: Path, report: IssueReport, runner: CommandRunner) -> List[str]:
    flagged = 0
    for path in _iter_files(root, SOURCE_SUFFIXES):
        content = path.read_text(encoding="utf-8", errors="ignore")
        # One finding per file
        if any(pattern.search(content) for pattern in SECRET_PATTERNS):
            report.add("critical", f"Potential hardcoded secret in {_display(root, path)}")
            flagged += 1
    return ["Issues found" if flagged else "No secrets detected"]


def check_env_file(root: Path, report: IssueReport, runner: CommandRunner) -> List[str]:
    if (root / ".env").exists():
        report.add("high", ".env file exists - ensure it's in .gitignore")
        return [".env file found"]
    return ["No .env file in repository"]


def check_solidity_version(root: Path, report: IssueReport, runner: CommandRunner) -> List[str]:
    notes = []
    for path in _contract_files(root):
        content = path.read_text(encoding="utf-8", errors="replace")
        if "pragma solidity ^0.8." in content:
            notes.append(f"{path.name}: Using secure Solidity version")
        if not PRAGMA_PATTERN.search(content):
            report.add("medium", f"{_display(root, path)}: Consider using Solidity ^0.8.x")
    return notes


def check_reentrancy(root: Path, report: IssueReport, runner: CommandRunner) -> List[str]:
    notes = []
    for path in _contract_files(root):
        content = path.read_text(encoding="utf-8", errors="replace")
        external_calls = any(call in content for call in (".call", ".send", ".transfer"))
        guarded = "ReentrancyGuard" in content or "nonReentrant" in content
        if external_calls and not guarded:
            report.add(
                "medium", f"{_display(root, path)}: External calls without reentrancy protection"
            )
            notes.append(f"{path.name}: Consider adding ReentrancyGuard")
        else:
            notes.append(f"{path.name}: Reentrancy checks OK")
    return notes


def check_access_control(root: Path, report: IssueReport, runner: CommandRunner) -> List[str]:
    notes = []
    for path in _contract_files(root):
        content = path.read_text(encoding="utf-8", errors="replace")
        has_modifiers = "modifier only" in content or "modifier auth" in content
        has_library = "Ownable" in content or "AccessControl" in content
        if not has_modifiers and not has_library:
            report.add("low", f"{_display(root, path)}: No access control modifiers detected")
            notes.append(f"{path.name}: Consider adding access control")
        else:
            notes.append(f"{path.name}: Access control implemented")
    return notes


def check_gas_optimization(root: Path, report: IssueReport, runner: CommandRunner) -> List[str]:
    notes = []
    for path in _contract_files(root):
        content = path.read_text(encoding="utf-8", errors="replace")
        if content.count("uint256") > UINT256_LIMIT:
            report.add(
                "info",
                f"{_display(root, path)}: Consider using smaller uint types for gas optimization",
            )
        notes.append(f"{path.name}: Gas optimization checks complete")
    return notes


def check_dependencies(root: Path, report: IssueReport, runner: CommandRunner) -> List[str]:
    if (root / "package.json").exists():
        command = ["npm", "audit", "--audit-level=moderate"]
    elif any((root / manifest).exists() for manifest in PYTHON_MANIFESTS):
        command = ["pip-audit"]
    else:
        raise AuditCheckError("No dependency manifest found")

    try:
        completed = runner(command, cwd=root, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise AuditCheckError(f"{command[0]} is not installed") from e

    if completed.returncode != 0:
        report.add("high", f"{command[0]} found vulnerabilities")
        return [f"Vulnerabilities detected - review {' '.join(command)} output"]
    return ["No critical vulnerabilities found"]


CONFIG_CHECKS = [
    (".gitignore", lambda c: ".env" in c and "node_modules" in c),
    ("hardhat.config.js", lambda c: "process.env" in c),
    (".env.example", lambda c: "0x" not in c and "sk-" not in c),
]


def check_configuration(root: Path, report: IssueReport, runner: CommandRunner) -> List[str]:
    notes = []
    for filename, is_safe in CONFIG_CHECKS:
        path = root / filename
        if not path.exists():
            continue
        if is_safe(path.read_text(encoding="utf-8", errors="replace")):
            notes.append(f"{filename}: Security configuration OK")
        else:
            report.add("medium", f"{filename}: Security configuration needs review")
            notes.append(f"{filename}: Review security settings")
    return notes


CHECKS = [
    ("Checking for hardcoded secrets", check_hardcoded_secrets),
    ("Checking .env file security", check_env_file),
    ("Checking Solidity compiler version", check_solidity_version),
    ("Checking for reentrancy protection", check_reentrancy),
    ("Checking access control patterns", check_access_control),
    ("Checking for gas optimization opportunities", check_gas_optimization),
    ("Checking dependencies for vulnerabilities", check_dependencies),
    ("Checking configuration security", check_configuration),
]


def run_audit(root: Path, runner: CommandRunner = subprocess.run) -> AuditResult:
    """
    Run every check against a project tree.

    Checks are independent; one that raises is recorded as skipped and the
    others still run.

    Args:
        root: Project root to scan
        runner: subprocess.run-compatible callable for the dependency audit

    Returns:
        AuditResult with the IssueReport and per-check status
    """
    root = Path(root).absolute()
    report = IssueReport()
    results = []

    for index, (title, check) in enumerate(CHECKS, start=1):
        LOGGER.info("%d/%d %s...", index, len(CHECKS), title)
        result = CheckResult(title=title)
        try:
            result.notes = check(root, report, runner)
        except (AuditCheckError, OSError, subprocess.SubprocessError) as e:
            LOGGER.debug("Check '%s' skipped: %s", title, e)
            result.skipped = True
        results.append(result)

    return AuditResult(report=report, checks=results)


def render_summary(result: AuditResult) -> str:
    """Render the audit summary printed at the end of a run."""
    report = result.report
    lines = ["=== Security Audit Report ===", ""]
    for index, check in enumerate(result.checks, start=1):
        lines.append(f"{index}/{len(result.checks)} {check.title}...")
        if check.skipped:
            lines.append("  Check skipped")
        lines += [f"  {note}" for note in check.notes]

    lines += [
        "",
        "=== Security Audit Summary ===",
        f"Critical Issues: {report.count('critical')}",
        f"High Issues: {report.count('high')}",
        f"Medium Issues: {report.count('medium')}",
        f"Low Issues: {report.count('low')}",
        f"Info: {report.count('info')}",
    ]

    for severity, heading in (
        ("critical", "CRITICAL ISSUES:"),
        ("high", "HIGH PRIORITY:"),
        ("medium", "MEDIUM PRIORITY:"),
    ):
        if report.issues[severity]:
            lines += ["", heading]
            lines += [f"  - {issue}" for issue in report.issues[severity]]

    significant = sum(report.count(s) for s in ("critical", "high", "medium"))
    lines.append("")
    if significant == 0:
        lines.append("No significant security issues detected!")
    elif report.has_critical:
        lines.append("Security audit failed - critical issues must be resolved")
    else:
        lines.append("Security audit completed with warnings")
    return "\n".join(lines)
