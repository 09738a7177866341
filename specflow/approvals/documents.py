# specflow/approvals/documents.py
"""
Decision and rationale documents written by the approval handlers.
"""
from datetime import datetime
from typing import List, Optional

import yaml

from specflow.approvals.catalog import ArchitecturePattern
from specflow.approvals.models import AlternativeConsidered, ApproveStackRequest
from specflow.models import DependencySelection


def _front_matter(title: str, version: int, approved_at: datetime, **extra: str) -> str:
    fields = {
        "title": title,
        "owner": "architect",
        "version": str(version),
        "date": approved_at.date().isoformat(),
        "status": "approved",
        **extra,
    }
    # User text lands in the values; safe_dump does the quoting
    body = yaml.safe_dump(fields, sort_keys=False, allow_unicode=True, default_flow_style=False, width=1000)
    return f"---\n{body}---"


def _table(headers: List[str], rows: List[List[str]]) -> str:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("-" * (len(h) + 2) for h in headers) + "|",
    ]
    lines.extend("| " + " | ".join(row) + " |" for row in rows)
    return "\n".join(lines)


def _alternatives_table(alternatives: List[AlternativeConsidered]) -> str:
    if not alternatives:
        return ""
    return "## Alternatives Considered\n\n" + _table(
        ["Stack", "Why Not Chosen"],
        [[alt.stack, alt.reason_not_chosen] for alt in alternatives],
    )


# ═══════════════════════════════════════════════════════════════════════════════
# STACK
# ═══════════════════════════════════════════════════════════════════════════════

def _composition_section(request: ApproveStackRequest, pattern: Optional[ArchitecturePattern]) -> str:
    composition = request.custom_composition
    if request.mode == "custom" and composition:
        frontend = composition.frontend
        frontend_details = " + ".join(
            part for part in [frontend.meta_framework or "N/A", frontend.styling, frontend.ui_library] if part
        )
        database_details = composition.database.type
        if composition.database.orm:
            database_details += f" + {composition.database.orm}"
        mobile = composition.mobile.platform
        return _table(
            ["Layer", "Technology", "Details"],
            [
                ["Frontend", frontend.framework, frontend_details],
                ["Mobile", mobile, "Responsive web only" if mobile == "none" else mobile],
                ["Backend", composition.backend.language, composition.backend.framework],
                ["Database", composition.database.provider, database_details],
                ["Deployment", composition.deployment.platform, f"{composition.deployment.architecture} architecture"],
            ],
        )

    rows = [["Template", request.stack_choice]]
    if pattern:
        rows.append(["Pattern", pattern.pattern_type])
        rows.append(["Examples", ", ".join(pattern.stack_examples)])
        rows.append(["Scale", pattern.dau_range])
    return _table(["Layer", "Selection"], rows)


def stack_decision_markdown(
    request: ApproveStackRequest,
    version: int,
    approved_at: datetime,
    pattern: Optional[ArchitecturePattern] = None,
) -> str:
    """stack-decision.md for one stack approval."""
    sections = [
        _front_matter(
            "Technology Stack Decision", version, approved_at,
            mode=request.mode, template=request.stack_choice,
        ),
        "# Technology Stack Decision",
        "## Selection Mode\n**"
        + ("Custom Stack" if request.mode == "custom" else f"Template: {request.stack_choice}")
        + "**",
        "## Composition\n\n" + _composition_section(request, pattern),
    ]

    preferences = {k: v for k, v in request.technical_preferences.items() if v}
    if preferences:
        sections.append("## Technical Preferences Applied\n\n" + _table(
            ["Category", "Library"],
            [[key.replace("_", " "), value] for key, value in preferences.items()],
        ))

    sections.append(f"## Rationale\n{request.reasoning or 'Stack approved by user.'}")

    alternatives = _alternatives_table(request.alternatives_considered)
    if alternatives:
        sections.append(alternatives)

    sections.append(
        "## Approval Details\n"
        f"- **Approved At**: {approved_at.isoformat()}\n"
        f"- **Mode**: {request.mode}\n"
        f"- **Decision Version**: {version}"
    )
    sections.append("## Next Steps\nThis stack decision will guide dependency generation in the DEPENDENCIES phase.")
    return "\n\n".join(sections) + "\n"


def stack_rationale_markdown(
    request: ApproveStackRequest,
    version: int,
    approved_at: datetime,
    pattern: Optional[ArchitecturePattern] = None,
) -> str:
    """stack-rationale.md for one stack approval."""
    date = approved_at.date().isoformat()
    sections = [
        _front_matter("Stack Selection Rationale", version, approved_at),
        "# Stack Selection Rationale",
        "## Summary\n"
        f"- **Selection Mode**: {request.mode}\n"
        f"- **Chosen Stack**: {request.stack_choice}\n"
        f"- **Decision Date**: {date}",
        f"## Reasoning\n\n{request.reasoning or 'User approved the stack selection.'}",
        "## Decision Factors\n\n"
        "The stack was selected based on:\n"
        "1. Project requirements from project-brief.md\n"
        "2. User persona needs from personas.md\n"
        "3. Technical constraints from constitution.md",
    ]

    if request.alternatives_considered:
        sections.append("## Alternatives Considered\n\n" + "\n".join(
            f"### {alt.stack}\n**Why not chosen**: {alt.reason_not_chosen}\n"
            for alt in request.alternatives_considered
        ))

    if pattern and pattern.tradeoffs:
        sections.append("## Trade-offs Accepted\n\n" + "\n".join(f"- {t}" for t in pattern.tradeoffs))
    else:
        sections.append("## Trade-offs Accepted\n\n*To be detailed based on the specific stack choice.*")

    sections.append(
        "## Future Considerations\n\n"
        "- Monitor performance and scalability as the project grows\n"
        "- Re-evaluate stack if requirements change significantly"
    )
    return "\n\n".join(sections) + "\n"


# ═══════════════════════════════════════════════════════════════════════════════
# DEPENDENCIES
# ═══════════════════════════════════════════════════════════════════════════════

def dependencies_decision_markdown(
    selection: DependencySelection,
    title: str,
    requests: Optional[str] = None,
) -> str:
    """dependencies-decision.md for one dependency approval."""
    sections = [
        _front_matter(
            "Dependency Decision", selection.decision_version, selection.approved_at,
            mode=selection.mode, preset=selection.preset_id or "custom",
        ),
        "# Dependency Decision",
        f"## Selection\n**{title}**",
        "## Composition\n\n" + _table(
            ["Layer", "Choice"],
            [
                ["Frontend", selection.frontend],
                ["Backend", selection.backend],
                ["Database", selection.database],
                ["Deployment", selection.deployment],
            ],
        ),
    ]

    if selection.packages:
        sections.append("## Packages\n\n" + "\n".join(f"- `{name}`" for name in selection.packages))
    if requests:
        sections.append(f"## Additional Requests\n\n{requests}")

    sections.append(
        "## Approval Details\n"
        f"- **Approved At**: {selection.approved_at.isoformat()}\n"
        f"- **Mode**: {selection.mode}\n"
        f"- **Architecture**: {selection.architecture or 'n/a'}\n"
        f"- **Platform**: {selection.platform or 'n/a'}\n"
        f"- **Decision Version**: {selection.decision_version}"
    )
    return "\n\n".join(sections) + "\n"


def dependencies_rationale_markdown(
    selection: DependencySelection,
    title: str,
    highlights: Optional[List[str]] = None,
) -> str:
    """dependencies-rationale.md for one dependency approval."""
    sections = [
        _front_matter("Dependency Rationale", selection.decision_version, selection.approved_at),
        "# Dependency Rationale",
        "## Summary\n"
        f"- **Selection**: {title}\n"
        f"- **Mode**: {selection.mode}\n"
        f"- **Decision Date**: {selection.approved_at.date().isoformat()}",
        f"## Notes\n\n{selection.notes or 'Dependencies approved by user.'}",
    ]
    if highlights:
        sections.append("## Highlights\n\n" + "\n".join(f"- {h}" for h in highlights))
    sections.append(
        "## Next Steps\n"
        "The approved dependency set is the input of the SOLUTIONING phase."
    )
    return "\n\n".join(sections) + "\n"
