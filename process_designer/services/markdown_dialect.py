"""Shared vocabulary of the process markdown dialect.

The dialect is line oriented::

    # BusinessProcessName
    <title>

    ## Description
    <free text>

    ## Dept
    <role name>

    ## Process
    #P<n> [#L<m>] <role> <label>
    Next: P<k>          (or)  Yes: P<k> / No: P<j>

    ## Reports
    <name> #L: <n>[, <n>...]

    ## Systems
    <name> #L: <n>[, <n>...]
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from process_designer.config import SUPPORTED_LOCALES, settings

TITLE_HEADER = "# BusinessProcessName"
SECTION_PREFIX = "## "

NEXT_PREFIX = "Next:"
YES_PREFIX = "Yes:"
NO_PREFIX = "No:"

ROW_TAG = "#L:"

# "#P3 #L4 Accounting Check budget" -> ("P3", "4", "Accounting", "Check budget")
PROCESS_LINE_RE = re.compile(r"^#(P[0-9]+)(?:\s+#L([0-9]+))?\s+(\S+)\s+(.+)$")

# "Purchase order #L: 8, 9" -> ("Purchase order", "8, 9")
RELATION_LINE_RE = re.compile(r"^(.+?)\s+#L:\s+(.+)$")


class Section(str, enum.Enum):
    NONE = "none"
    TITLE = "title"
    DESCRIPTION = "description"
    DEPT = "dept"
    PROCESS = "process"
    REPORTS = "reports"
    SYSTEMS = "systems"


SECTION_HEADERS: dict[str, Section] = {
    "Description": Section.DESCRIPTION,
    "Dept": Section.DEPT,
    "Process": Section.PROCESS,
    "Reports": Section.REPORTS,
    "Systems": Section.SYSTEMS,
}


def match_section(line: str) -> Section | None:
    """Return the section a ``## <Name>`` header opens.

    Returns None when ``line`` is not a section header at all, and
    ``Section.NONE`` for a header whose name is not part of the dialect.
    """
    if not line.startswith(SECTION_PREFIX):
        return None
    name = line[len(SECTION_PREFIX):].strip()
    return SECTION_HEADERS.get(name, Section.NONE)


@dataclass(frozen=True)
class Placeholders:
    title: str  # title of a process whose markdown names none
    unassigned: str  # role written for a node without a swimlane
    none: str  # row list written for a report/system without nodes


PLACEHOLDERS: dict[str, Placeholders] = {
    "en": Placeholders(title="New business process", unassigned="unassigned", none="none"),
    "ja": Placeholders(title="新規業務プロセス", unassigned="未割当", none="なし"),
}


def resolve_locale(locale: str | None = None) -> str:
    if locale is None:
        return settings.markdown_locale
    locale = locale.strip().lower()
    return locale if locale in SUPPORTED_LOCALES else "en"


def get_placeholders(locale: str | None = None) -> Placeholders:
    return PLACEHOLDERS[resolve_locale(locale)]
