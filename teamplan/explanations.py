"""
Dimension explanations - what a dimension means and why users should care.

``resolve_explanation`` always returns a tagged result: ``Known`` for a
curated entry, ``Generated`` for a placeholder built from the name.
"""

from dataclasses import dataclass

from .models import Explanation

DIMENSION_EXPLANATIONS: dict[str, Explanation] = {
    "workCaptured": Explanation(
        title="Work Visibility",
        what_it_means="How much of your team's actual work is tracked in Jira",
        why_it_matters=(
            "When work happens outside Jira, you can't measure progress, identify "
            "bottlenecks, or plan accurately"
        ),
        impact="Hidden work leads to unrealistic commitments and burnout",
    ),
    "ticketReadiness": Explanation(
        title="Ticket Quality",
        what_it_means="Whether tickets have enough information to be actionable",
        why_it_matters=(
            "Well-documented tickets reduce back-and-forth questions and help new "
            "team members get up to speed"
        ),
        impact="Poor documentation causes delays, rework, and knowledge loss",
    ),
    "dataFreshness": Explanation(
        title="Data Freshness",
        what_it_means="How current and up-to-date your Jira data is",
        why_it_matters="Stale data makes dashboards unreliable and hides real project status",
        impact="Outdated data leads to wrong decisions and missed deadlines",
    ),
    "issueTypeConsistency": Explanation(
        title="Issue Type Consistency",
        what_it_means="Whether your team uses issue types (Story, Bug, Task) consistently",
        why_it_matters=(
            "Consistent categorization makes reporting accurate and helps identify patterns"
        ),
        impact="Inconsistent types make it hard to track work types and prioritize correctly",
    ),
    "workHierarchy": Explanation(
        title="Work Structure",
        what_it_means="How well your tickets are linked to parent items (Epics, Initiatives)",
        why_it_matters="Good structure shows how individual work connects to bigger goals",
        impact="Poor structure makes it hard to see progress toward objectives",
    ),
    "estimationCoverage": Explanation(
        title="Estimation Coverage",
        what_it_means="What percentage of your work items have size estimates",
        why_it_matters="Estimates help with capacity planning and setting realistic sprint goals",
        impact="Missing estimates lead to overcommitment and unpredictable delivery",
    ),
    "sizingConsistency": Explanation(
        title="Estimation Accuracy",
        what_it_means="How reliable your team's estimates are compared to actual effort",
        why_it_matters="Accurate estimates improve planning confidence and stakeholder trust",
        impact="Poor estimates cause missed deadlines and planning chaos",
    ),
    "teamCollaboration": Explanation(
        title="Team Collaboration",
        what_it_means="How visible collaboration is through comments, mentions, and handoffs",
        why_it_matters="Visible collaboration reduces silos and keeps everyone aligned",
        impact="Poor collaboration leads to duplicated effort and miscommunication",
    ),
    "blockerManagement": Explanation(
        title="Blocker Management",
        what_it_means="How well blockers are flagged, tracked, and resolved",
        why_it_matters="Quick blocker resolution keeps work flowing smoothly",
        impact="Unresolved blockers cause delays and frustration",
    ),
    "automationOpportunities": Explanation(
        title="Workflow Efficiency",
        what_it_means="Whether your workflows could benefit from automation",
        why_it_matters="Automation reduces manual work and ensures consistency",
        impact="Manual processes waste time and introduce errors",
    ),
    "sprintHygiene": Explanation(
        title="Sprint Health",
        what_it_means="How well your team follows sprint practices and completes commitments",
        why_it_matters="Healthy sprints improve predictability and team morale",
        impact="Poor sprint hygiene causes scope creep and burnout",
    ),
}


@dataclass(frozen=True)
class Known:
    explanation: Explanation
    is_generated: bool = False


@dataclass(frozen=True)
class Generated:
    explanation: Explanation
    is_generated: bool = True


ResolvedExplanation = Known | Generated


def generated_explanation(dimension_name: str) -> Explanation:
    return Explanation(
        title=dimension_name,
        what_it_means=f"How well your team performs in {dimension_name.lower()}",
        why_it_matters="Improving this area helps your team work more effectively",
        impact="Poor performance in this area can slow down your team",
    )


def resolve_explanation(dimension_key: str, dimension_name: str) -> ResolvedExplanation:
    known = DIMENSION_EXPLANATIONS.get(dimension_key)
    if known is not None:
        return Known(known)
    return Generated(generated_explanation(dimension_name or dimension_key))
