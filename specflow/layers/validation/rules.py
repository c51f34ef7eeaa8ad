"""Rule tables and text patterns used by the validation engine.

All patterns are case-insensitive and operate on raw Markdown text.
"""

import re

from specflow.models import SpecificationPhase


# --- Requirements ---------------------------------------------------------

USER_STORY_PATTERN = re.compile(r"\*\*User Story:\*\*|As a .* I want .* so that", re.IGNORECASE)
EARS_PATTERN = re.compile(r"WHEN .* THEN .* SHALL|IF .* THEN .* SHALL", re.IGNORECASE)
INTRODUCTION_PATTERN = re.compile(r"# Introduction|## Introduction", re.IGNORECASE)
NUMBERED_REQUIREMENT_PATTERN = re.compile(r"### Requirement \d+|## Requirement \d+", re.IGNORECASE)

REQUIREMENTS_MIN_WORDS = 100
REQUIREMENTS_MIN_SECTIONS = 2
REQUIREMENTS_MIN_LENGTH = 100


# --- Design ---------------------------------------------------------------

# (pattern, section name, result id)
DESIGN_SECTIONS = [
    (re.compile(r"# Overview|## Overview", re.IGNORECASE), "Overview", "design-no-overview"),
    (re.compile(r"# Architecture|## Architecture", re.IGNORECASE), "Architecture", "design-no-architecture"),
    (re.compile(r"# Components|## Components", re.IGNORECASE), "Components", "design-no-components"),
    (re.compile(r"# Data Models?|## Data Models?", re.IGNORECASE), "Data Models", "design-no-data-models"),
]
DIAGRAM_PATTERN = re.compile(r"```mermaid|```plantuml|!\[.*\]\(.*\)", re.IGNORECASE)
TECHNOLOGY_PATTERN = re.compile(r"technology|framework|library|database|language", re.IGNORECASE)
ARCHITECTURE_PATTERN = DESIGN_SECTIONS[1][0]
COMPONENTS_PATTERN = DESIGN_SECTIONS[2][0]

DESIGN_MIN_WORDS = 200
DESIGN_MIN_TECH_MENTIONS = 3
DESIGN_MIN_LENGTH = 200


# --- Tasks ----------------------------------------------------------------

CHECKLIST_PATTERN = re.compile(r"- \[ \]|- \[x\]", re.IGNORECASE)
NUMBERED_TASK_PATTERN = re.compile(r"- \[ \] \d+\.", re.IGNORECASE)
REQUIREMENT_REF_PATTERN = re.compile(r"_Requirements?:.*\d+", re.IGNORECASE)
REQUIREMENT_REF_MARKER = re.compile(r"_Requirements?:", re.IGNORECASE)
SUBTASK_PATTERN = re.compile(r"- \[ \] \d+\.\d+", re.IGNORECASE)
OPEN_TASK_MARKER = "- [ ]"

TASKS_MIN_ITEMS = 3
TASKS_HIERARCHY_THRESHOLD = 5


# --- Completion -----------------------------------------------------------

ERROR_PENALTY = 25


# UI hint fields per phase, independent from the pass/fail rule list.
REQUIRED_FIELDS: dict[SpecificationPhase, list[str]] = {
    SpecificationPhase.REQUIREMENTS: ["user stories", "acceptance criteria", "business rules"],
    SpecificationPhase.DESIGN: [
        "architecture overview",
        "component specifications",
        "data models",
        "interfaces",
    ],
    SpecificationPhase.TASKS: [
        "task breakdown",
        "dependencies",
        "effort estimation",
        "requirement traceability",
    ],
    SpecificationPhase.IMPLEMENTATION: ["code implementation", "unit tests", "integration tests"],
    SpecificationPhase.REVIEW: ["code review", "testing results", "quality metrics"],
    SpecificationPhase.COMPLETED: ["documentation", "deployment", "user acceptance"],
}
