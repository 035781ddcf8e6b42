"""Mutation testing analysis for the squaring engine.

Wraps ``mutmut`` results and maps surviving mutants back to the engine
branch they touch, so a survivor points at the white-box test to write.

Workflow::

    pip install mutmut
    mutmut run --paths-to-mutate=engine.py --tests-dir=tests/
    python -m validation.mutation_analysis

The goal: every mutant of ``engine.py`` is *killed* by at least one test.
"""
from __future__ import annotations

import re
import subprocess
import sys
from dataclasses import dataclass, field

TARGET = "engine.py"

_BRANCH_TAG = re.compile(r"#\s+([A-Z]{3}-[A-Z-]+)")


@dataclass
class Mutant:
    id: int
    diff: str
    branch: str | None = None


@dataclass
class MutationReport:
    killed: int = 0
    survived: int = 0
    timeout: int = 0
    suspicious: int = 0
    survivors: list[Mutant] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.killed + self.survived + self.timeout + self.suspicious

    @property
    def score(self) -> float:
        if self.total == 0:
            return 0.0
        return self.killed / self.total

    def summary(self) -> str:
        lines = [
            "Mutation Testing Report",
            "=" * 40,
            f"Total mutants:   {self.total}",
            f"Killed:          {self.killed}",
            f"Survived:        {self.survived}",
            f"Timeout:         {self.timeout}",
            f"Suspicious:      {self.suspicious}",
            f"Mutation score:  {self.score:.1%}",
        ]
        if self.survivors:
            lines.append("")
            lines.append(f"Surviving mutants in {TARGET}:")
            for m in self.survivors:
                where = m.branch or "untagged line"
                lines.append(f"  [mutant {m.id}] {where}")
                lines.append(f"       {m.diff}")
        elif self.total:
            lines.append("\nAll mutants killed.")
        return "\n".join(lines)


def parse_counts(output: str, report: MutationReport) -> MutationReport:
    """Fill the counters from ``mutmut results`` output.

    mutmut prints lines like "Killed 42" or "Survived 3".
    """
    for line in output.strip().splitlines():
        parts = line.split()
        if len(parts) < 2 or not parts[-1].isdigit():
            continue
        count = int(parts[-1])
        label = parts[0].lower()
        if "killed" in label:
            report.killed = count
        elif "survived" in label:
            report.survived = count
        elif "timeout" in label:
            report.timeout = count
        elif "suspicious" in label:
            report.suspicious = count
    return report


def branch_of(diff: str) -> str | None:
    """Return the engine branch id mentioned on a mutated line, if any."""
    match = _BRANCH_TAG.search(diff)
    return match.group(1) if match else None


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, capture_output=True, text=True, cwd=".")


def collect() -> MutationReport:
    """Run ``mutmut results`` and build a structured report."""
    result = _run(["mutmut", "results"])
    report = parse_counts(result.stdout, MutationReport())

    if report.survived:
        ids = _run(["mutmut", "results", "--survived"])
        for line in ids.stdout.split():
            if not line.isdigit():
                continue
            detail = _run(["mutmut", "show", line]).stdout.strip()
            report.survivors.append(
                Mutant(id=int(line), diff=detail[:200], branch=branch_of(detail))
            )

    return report


def main() -> None:
    print("Analyzing mutation testing results ...\n")
    try:
        report = collect()
    except FileNotFoundError:
        print("mutmut not installed.  Install with: pip install mutmut")
        sys.exit(1)
    print(report.summary())

    if report.total == 0:
        print("\nNo mutmut results found.  Run mutmut first:")
        print(f"  mutmut run --paths-to-mutate={TARGET} --tests-dir=tests/")
        sys.exit(1)

    if report.score < 1.0:
        print(f"\nCurrent: {report.score:.1%}")
        print(f"Action:  Add tests for the {report.survived} surviving mutant(s)")
        sys.exit(1)
    print("\nMutation score target met!")


if __name__ == "__main__":
    main()
